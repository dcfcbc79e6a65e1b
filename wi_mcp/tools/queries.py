"""GraphQL documents sent to the Wildlife Insights API."""

DISCOVER_OBSERVATIONS = """
query GetDiscoverData($filters: DiscoverObservationFilters!) {
  getDiscoverData(filters: $filters) {
    metadata { doctype version }
    data {
      counts {
        organizations initiatives projects species dataFiles devices deployments
        wildlifeImages countries locations samplingDays sequenceCount wildlifeSequenceCount
      }
      extent {
        sw { lng lat }
        ne { lng lat }
      }
      projects {
        id name slug shortName country photo organization
        location { lng lat }
      }
    }
  }
}
"""

GET_PROJECTS = """
query GetProjects($pagination: Pagination, $filters: ProjectFilters) {
  getProjects(pagination: $pagination, filters: $filters) {
    data {
      id name slug abbreviation shortName design objectives rightsHolder accessRights
      projectUrl projectStatus methodology status startDate endDate embargoDate
      embargoConfirmationApproval remarks projectCreditLine acknowledgements dataCitation
      embargo organizationId
      organization { id name }
      initiativeId
      initiatives { id name }
      deleteDataFilesWithIdentifiedHumans metadataLicense dataFilesLicense metadata
      disableAnalytics disableCount publicLatitude publicLongitude publicLatitudeStr
      publicLongitudeStr projectType taggerUpload createdAt updatedAt catalogueImageCount
      isPrivate participantId fuzzed primaryCountry additionalCountries featuredDataFileId
    }
    meta { totalItems totalPages size page }
  }
}
"""

GET_DEPLOYMENTS = """
query GetDeploymentsByProject($projectId: Int!, $pagination: Pagination, $filters: DeploymentFilters) {
  getDeploymentsByProject(projectId: $projectId, pagination: $pagination, filters: $filters) {
    data {
      id deploymentName startDatetime endDatetime locationId __typename
    }
    __typename
  }
}
"""

MY_ORGANIZATIONS = """
query GetMyOrganizations {
  getParticipantData {
    user { id email firstName lastName }
    organizationRoles {
      organization {
        id name streetAddress city state countryCode email organizationUrl remarks
        projectType imageProjectCount sequenceProjectCount createdAt updatedAt
      }
      role { id name slug superAdmin }
    }
  }
}
"""

MY_ORGANIZATION_IDS = """
query GetMyOrganizations {
  getParticipantData {
    organizationRoles {
      organization { id name }
    }
  }
}
"""

EXPLORE_ORGANIZATIONS = """
query GetMyOrganizations {
  getParticipantData {
    user { id firstName lastName }
    organizationRoles {
      organization { id name projectType imageProjectCount sequenceProjectCount }
      role { name slug }
    }
  }
}
"""

PROJECTS_BY_ORGANIZATION = """
query GetProjectsByOrganization($organizationId: Int!, $pagination: Pagination) {
  getProjects(organizationId: $organizationId, pagination: $pagination) {
    data {
      id name shortName projectType status startDate endDate primaryCountry catalogueImageCount
      organization { id name }
    }
    meta { totalItems totalPages }
  }
}
"""

EXPLORE_DEPLOYMENTS = """
query GetDeploymentsByProject($projectId: Int!) {
  getDeploymentsByProject(
    projectId: $projectId
    pagination: { pageSize: 100, sort: [{ column: "deploymentName", order: "ASC" }] }
    filters: {}
  ) {
    data {
      id deploymentName startDatetime endDatetime
      location { id placename latitude longitude }
      device { id name }
    }
    meta { totalItems }
  }
}
"""

IDENTIFY_COUNT = """
query getIdentifyPhotosCount($projectId: Int!) {
  getCountInIdentifyForProject(projectId: $projectId) {
    meta { totalItems __typename }
    __typename
  }
}
"""

IDENTIFY_IMAGES = """
query getDataFilesForIdentifyForProject($projectId: Int!, $pagination: Pagination) {
  getDataFilesForIdentifyForProject(projectId: $projectId, pagination: $pagination) {
    data {
      id filename filepath thumbnailUrl timestamp
      deployment {
        id deploymentName
        location { placename latitude longitude }
      }
      identificationOutputs {
        id blankYn confidence
        identifiedObjects {
          taxonomy { scientificName commonNameEnglish }
          count
        }
      }
    }
    meta { totalItems totalPages size page }
  }
}
"""

CREATE_IDENTIFICATION = """
mutation createIdentificationOutput(
  $projectId: Int!
  $deploymentId: Int!
  $dataFileId: Int!
  $identification: IdentificationOutputCreate!
) {
  createIdentificationOutput(
    projectId: $projectId
    deploymentId: $deploymentId
    dataFileId: $dataFileId
    body: $identification
  ) {
    id blankYn confidence timestamp
    identificationMethod { name }
    identifiedObjects {
      taxonomy { scientificName commonNameEnglish }
      count certainity
    }
  }
}
"""

_ANALYTICS_FIELDS = """
      numDevices numDeployments numIdentifications numSpecies numImages numIdentifyImages
      numSequences uniqueLocations blankImagesCount blankSequencesCount unknownImagesCount
      unknownSequencesCount samplingDaysCount usersWithRolesOnProject numUsers
      wildlifeImagesCount wildlifeSequencesCount nonWildlifeImagesCount nonWildlifeSequencesCount
      avgNumberOfSequencesPerDeployment averageNumberOfImagesPerDeployment
      imagesPerSpecies { scientificName commonNameEnglish count }
      sequencesPerSpecies { scientificName commonNameEnglish count }
      imagesPerLocation { placename latitude longitude count }
      organizationCount initiativeCount projectCount numCountries firstSurveyDate lastSurveyDate
"""

PROJECT_ANALYTICS = """
query GetProjectAnalytics($projectId: Int!, $organizationId: Int, $initiativeId: Int) {
  getAnalytics(projectId: $projectId, organizationId: $organizationId, initiativeId: $initiativeId) {
%s
  }
}
""" % _ANALYTICS_FIELDS

SPECIES_ANALYTICS = """
query GetSpeciesAnalytics($projectId: Int!, $parameterKey: String!, $filters: AnalyticsFilters) {
  getAnalyticsByParameter(projectId: $projectId, parameterKey: $parameterKey, filters: $filters) {
%s
  }
}
""" % _ANALYTICS_FIELDS

RANCH_ANALYTICS = """
query GetRanchAnalytics($projectId: Int!) {
  getAnalytics(projectId: $projectId) {
    numSpecies numImages wildlifeImagesCount numIdentifyImages samplingDaysCount
    uniqueLocations firstSurveyDate lastSurveyDate
    imagesPerSpecies { scientificName commonNameEnglish count }
    imagesPerLocation { placename latitude longitude count }
  }
}
"""

DEPLOYMENT_ANALYTICS = """
query GetDeploymentAnalytics($projectId: Int!, $filters: DeploymentFilters) {
  getDeploymentsByProject(projectId: $projectId, filters: $filters, pagination: { pageSize: 100 }) {
    data {
      id deploymentName startDatetime endDatetime
      location { id placename latitude longitude }
      device { id name }
      baitType { id typeName }
      sensorHeight sensorOrientation remarks
    }
    meta { totalItems }
  }
}
"""

CREATE_UPLOAD = """
mutation createUIUpload($uiUploadCreateRequest: UIUploadCreateRequest!) {
  createUIUpload(uiUploadCreateRequest: $uiUploadCreateRequest) {
    id projectId deploymentId noOfImages status createdAt
  }
}
"""

UPLOAD_URL = """
query getUploadUrlByFilenameAndSize(
  $projectId: Int!
  $deploymentId: Int!
  $uploadId: Int!
  $fileName: String!
  $fileSize: String!
  $contentType: String!
  $clientId: String
) {
  getUploadUrlByFilenameAndSize(
    projectId: $projectId
    deploymentId: $deploymentId
    uploadId: $uploadId
    fileName: $fileName
    fileSize: $fileSize
    contentType: $contentType
    clientId: $clientId
  ) {
    id mainUrl url downloadUrl
  }
}
"""

COMPLETE_UPLOAD = """
mutation updateUIUpload($uploadId: Int!, $updateUIUplaodRequest: UIUploadUpdateRequest!) {
  updateUIUpload(uploadId: $uploadId, updateUIUplaodRequest: $updateUIUplaodRequest) {
    id deploymentId status finishedAt noOfImages noOfSuccessfulImages noOfFailedImages
  }
}
"""

PROJECT_DEPLOYMENTS_FOR_UPLOAD = """
query getDeploymentsByProject($projectId: Int!) {
  getDeploymentsByProject(projectId: $projectId, pagination: { pageSize: 100 }) {
    data {
      id deploymentName startDatetime endDatetime locationId
      location { id placename }
    }
  }
}
"""

DEPLOYMENT = """
query getDeployment($deploymentId: Int!) {
  getDeployment(deploymentId: $deploymentId) {
    id deploymentName startDatetime endDatetime locationId
    location { id placename latitude longitude }
  }
}
"""

FILES_BY_NAME_AND_SIZE = """
query getDataFilesByFileNameAndSize($projectId: Int!, $deploymentId: Int!, $fileNameList: [String]!) {
  getDataFilesByFileNameAndSize(
    projectId: $projectId
    deploymentId: $deploymentId
    fileNameList: $fileNameList
  ) {
    exists
  }
}
"""
