from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    def to_variables(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ToolInput(WireModel):
    bearer_token: str | None = Field(
        default=None, description="Bearer token for this call only; overrides the server default"
    )


# Shared fragments

class LngLat(WireModel):
    lng: float
    lat: float


class BoundingBox(WireModel):
    sw: LngLat
    ne: LngLat


class Timespan(WireModel):
    start: str
    end: str


class NumericRange(WireModel):
    start: float
    end: float


# Auth / server

class SetTokenInput(WireModel):
    token: str = Field(min_length=10, description="Wildlife Insights bearer token")


class RefreshTokenInput(WireModel):
    refresh_token: str | None = None


class EmptyInput(WireModel):
    pass


# Discovery

class DiscoverObservationFilters(WireModel):
    countries: list[str] | None = None
    timespan: Timespan | None = None
    geo_regions: list[float] | None = None
    projects: list[int] | None = None
    initiatives: list[int] | None = None
    endangered: list[bool] | None = None
    bounding_box: BoundingBox | None = None
    taxonomies: list[str] | None = None
    continents: list[str] | None = None
    project_name_substring: str | None = None
    metadata_license: list[str] | None = None
    image_license: list[str] | None = None
    embargo: str | None = None
    bait_use: list[str] | None = None
    bait_type: list[str] | None = None
    feature_types: list[str] | None = None
    sensor_layout: list[str] | None = None
    sensor_method: str | None = None
    sensor_cluster: str | None = None
    taxonomy_class: list[str] | None = None
    taxonomy_order: list[str] | None = None
    taxonomy_family: list[str] | None = None
    taxonomy_genus: list[str] | None = None
    taxonomy_species: list[str] | None = None
    taxonomy_common_name: list[str] | None = None
    blank_images: str | None = None


class DiscoverObservationsInput(ToolInput):
    filters: DiscoverObservationFilters


class GetProjectsInput(ToolInput):
    limit: int = Field(default=50, ge=1)
    offset: int = Field(default=0, ge=0)


class GetDeploymentsInput(ToolInput):
    project_id: int
    limit: int = Field(default=100, ge=1)
    offset: int = Field(default=0, ge=0)


class ExecuteGraphQLInput(ToolInput):
    query: str = Field(min_length=1)
    variables: dict[str, Any] = Field(default_factory=dict)
    operation_name: str | None = None


# Organizations

class MyOrganizationsInput(ToolInput):
    pass


class MyProjectsInput(ToolInput):
    organization_id: int | None = None
    organization_name: str | None = None


class ExploreMyDataInput(ToolInput):
    step: Literal["organizations", "projects", "deployments"] = "organizations"
    organization_id: int | None = None
    project_id: int | None = None


# Identification

class ProjectInput(ToolInput):
    project_id: int


class ImagesForIdentificationInput(ToolInput):
    project_id: int
    limit: int = Field(default=20, ge=1)
    offset: int = Field(default=0, ge=0)


class IdentifiedObject(WireModel):
    taxonomy_id: str
    count: int = 1
    # sic, upstream field name
    certainity: float | None = None
    relative_age: str | None = None
    sex: str | None = None
    behavior: str | None = None
    markings: str | None = None
    individual_identified: bool = False


class DetectionBox(WireModel):
    detection_box: str


class Identification(WireModel):
    blank_yn: bool
    identification_method_id: int = 1
    identified_objects: list[IdentifiedObject] | None = None
    bounding_boxes: list[DetectionBox] | None = None


class SubmitIdentificationInput(ToolInput):
    project_id: int
    deployment_id: int
    data_file_id: int
    identification: Identification


class BulkIdentificationItem(WireModel):
    deployment_id: int
    data_file_id: int
    identification: Identification


class BulkIdentifyInput(ToolInput):
    project_id: int
    identifications: list[BulkIdentificationItem] = Field(min_length=1)


# Analytics

class AnalyticsFilters(WireModel):
    taxonomy_uuids: list[str] | None = Field(default=None, alias="taxonomyUUIDs")
    subproject_ids: list[int] | None = None
    iucn_ids: list[int] | None = None
    location_ids: list[int] | None = None
    is_sequence: bool | None = None
    device_ids: list[int] | None = None
    sensor_height: list[str] | None = None
    sensor_status: list[str] | None = None
    sensor_orientation: list[str] | None = None
    bait_type_ids: list[int] | None = None
    feature_types: list[str] | None = None
    timespans: list[Timespan] | None = None
    identified_by_expert_flag: bool | None = None
    is_analytics: bool | None = None


class DeploymentFilters(WireModel):
    location_ids: list[int] | None = None
    name: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    timespans: list[Timespan] | None = None
    subproject_ids: list[int] | None = None
    taxonomy_uuids: list[str] | None = Field(default=None, alias="taxonomyUUIDs")
    identified_by_expert_flag: bool | None = None
    is_sequence: bool | None = None
    iucn_ids: list[int] | None = None
    device_ids: list[int] | None = None
    sensor_height: list[str] | None = None
    sensor_status: list[str] | None = None
    sensor_orientation: list[str] | None = None
    bait_type_ids: list[int] | None = None
    feature_types: list[str] | None = None
    deployment_ids: list[int] | None = None
    rotation_angle: float | None = Field(default=None, alias="rotation_angle")
    is_analytics: bool | None = None
    tagger_ids: list[int] | None = None
    date_spans: list[Timespan] | None = None
    data_file_time_spans: list[Timespan] | None = None
    confidence_range: list[NumericRange] | None = None
    include_location_name: bool | None = None


class ProjectAnalyticsInput(ToolInput):
    project_id: int
    organization_id: int | None = None
    initiative_id: int | None = None


class SpeciesAnalyticsInput(ToolInput):
    project_id: int
    filters: AnalyticsFilters | None = None


class RanchInsightsInput(ToolInput):
    project_id: int
    ranch_goals: Literal["conservation", "hunting", "ecotourism", "balanced"] = "balanced"


class DeploymentAnalyticsInput(ToolInput):
    project_id: int
    filters: DeploymentFilters | None = None


# Uploads

class CreateUploadInput(ToolInput):
    project_id: int
    deployment_id: int
    no_of_images: int = Field(default=1, ge=1)
    no_of_duplicate_images: int = Field(default=0, ge=0)
    duplicate_flag_on_upload: bool = True


class UploadUrlInput(ToolInput):
    project_id: int
    deployment_id: int
    upload_id: int
    file_name: str = Field(min_length=1)
    file_size: str
    content_type: str = "image/jpeg"
    client_id: str | None = None


class CompleteUploadInput(ToolInput):
    upload_id: int
    status: Literal["UPLOAD_FINISHED", "PROCESSING", "FINISHED"] = "UPLOAD_FINISHED"


class ValidateDeploymentInput(ToolInput):
    project_id: int
    deployment_id: int | None = None


class ValidateFileInput(ToolInput):
    project_id: int
    deployment_id: int
    file_name: str = Field(min_length=1)
    file_size: str


class UploadImageFileInput(ToolInput):
    project_id: int
    deployment_id: int
    local_file_path: str = Field(min_length=1)
    content_type: str = "image/jpeg"
    validate_file: bool = True


class UploadImageWorkflowInput(ToolInput):
    project_id: int | None = None
    deployment_id: int | None = None
    file_name: str | None = None
    file_size: str | None = None
    content_type: str = "image/jpeg"
    validate_file: bool = True
    skip_deployment_validation: bool = False
