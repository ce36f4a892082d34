"""
GraphQL operation catalog for the Hoppscotch backend.

Static documents only. Each operation takes the identifiers in its name;
request envelopes travel in the opaque ``request`` string field.
"""

import re

# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

MY_TEAMS = """
query MyTeams {
  myTeams {
    id
    name
    myRole
  }
}
"""

TEAM = """
query Team($teamID: ID!) {
  team(teamID: $teamID) {
    id
    name
    myRole
    ownersCount
    editorsCount
    viewersCount
  }
}
"""

ROOT_COLLECTIONS_OF_TEAM = """
query RootCollectionsOfTeam($teamID: ID!, $cursor: ID, $take: Int) {
  rootCollectionsOfTeam(teamID: $teamID, cursor: $cursor, take: $take) {
    id
    title
    data
  }
}
"""

COLLECTION = """
query Collection($collectionID: ID!) {
  collection(collectionID: $collectionID) {
    id
    title
    data
    parentID
    children {
      id
      title
    }
  }
}
"""

EXPORT_COLLECTIONS_TO_JSON = """
query ExportCollectionsToJSON($teamID: ID!) {
  exportCollectionsToJSON(teamID: $teamID)
}
"""

EXPORT_COLLECTION_TO_JSON = """
query ExportCollectionToJSON($teamID: ID!, $collectionID: ID!) {
  exportCollectionToJSON(teamID: $teamID, collectionID: $collectionID)
}
"""

REQUEST = """
query Request($requestID: ID!) {
  request(requestID: $requestID) {
    id
    title
    request
    collectionID
    teamID
  }
}
"""

REQUESTS_IN_COLLECTION = """
query RequestsInCollection($collectionID: ID!, $cursor: ID, $take: Int) {
  requestsInCollection(collectionID: $collectionID, cursor: $cursor, take: $take) {
    id
    title
    request
  }
}
"""

SEARCH_FOR_REQUEST = """
query SearchForRequest($teamID: ID!, $searchTerm: String!, $cursor: ID, $take: Int) {
  searchForRequest(teamID: $teamID, searchTerm: $searchTerm, cursor: $cursor, take: $take) {
    id
    title
    request
    collectionID
  }
}
"""

TEAM_WITH_ENVIRONMENTS = """
query TeamWithEnvironments($teamID: ID!) {
  team(teamID: $teamID) {
    id
    name
    teamEnvironments {
      id
      name
      variables
    }
  }
}
"""

# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

CREATE_ROOT_COLLECTION = """
mutation CreateRootCollection($teamID: ID!, $title: String!, $data: String) {
  createRootCollection(teamID: $teamID, title: $title, data: $data) {
    id
    title
  }
}
"""

CREATE_CHILD_COLLECTION = """
mutation CreateChildCollection($collectionID: ID!, $childTitle: String!, $data: String) {
  createChildCollection(collectionID: $collectionID, childTitle: $childTitle, data: $data) {
    id
    title
    parentID
  }
}
"""

DELETE_COLLECTION = """
mutation DeleteCollection($collectionID: ID!) {
  deleteCollection(collectionID: $collectionID)
}
"""

CREATE_REQUEST_IN_COLLECTION = """
mutation CreateRequestInCollection($collectionID: ID!, $data: CreateTeamRequestInput!) {
  createRequestInCollection(collectionID: $collectionID, data: $data) {
    id
    title
    request
  }
}
"""

UPDATE_REQUEST = """
mutation UpdateRequest($requestID: ID!, $data: UpdateTeamRequestInput!) {
  updateRequest(requestID: $requestID, data: $data) {
    id
    title
    request
  }
}
"""

DELETE_REQUEST = """
mutation DeleteRequest($requestID: ID!) {
  deleteRequest(requestID: $requestID)
}
"""

MOVE_REQUEST = """
mutation MoveRequest($requestID: ID!, $destCollID: ID!) {
  moveRequest(requestID: $requestID, destCollID: $destCollID) {
    id
    collectionID
  }
}
"""

CREATE_TEAM_ENVIRONMENT = """
mutation CreateTeamEnvironment($teamID: ID!, $name: String!, $variables: String!) {
  createTeamEnvironment(teamID: $teamID, name: $name, variables: $variables) {
    id
    name
    variables
  }
}
"""

UPDATE_TEAM_ENVIRONMENT = """
mutation UpdateTeamEnvironment($id: ID!, $name: String!, $variables: String!) {
  updateTeamEnvironment(id: $id, name: $name, variables: $variables) {
    id
    name
    variables
  }
}
"""

DELETE_TEAM_ENVIRONMENT = """
mutation DeleteTeamEnvironment($id: ID!) {
  deleteTeamEnvironment(id: $id)
}
"""

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

QUERIES = {
    "MyTeams": MY_TEAMS,
    "Team": TEAM,
    "RootCollectionsOfTeam": ROOT_COLLECTIONS_OF_TEAM,
    "Collection": COLLECTION,
    "ExportCollectionsToJSON": EXPORT_COLLECTIONS_TO_JSON,
    "ExportCollectionToJSON": EXPORT_COLLECTION_TO_JSON,
    "Request": REQUEST,
    "RequestsInCollection": REQUESTS_IN_COLLECTION,
    "SearchForRequest": SEARCH_FOR_REQUEST,
    "TeamWithEnvironments": TEAM_WITH_ENVIRONMENTS,
}

MUTATIONS = {
    "CreateRootCollection": CREATE_ROOT_COLLECTION,
    "CreateChildCollection": CREATE_CHILD_COLLECTION,
    "DeleteCollection": DELETE_COLLECTION,
    "CreateRequestInCollection": CREATE_REQUEST_IN_COLLECTION,
    "UpdateRequest": UPDATE_REQUEST,
    "DeleteRequest": DELETE_REQUEST,
    "MoveRequest": MOVE_REQUEST,
    "CreateTeamEnvironment": CREATE_TEAM_ENVIRONMENT,
    "UpdateTeamEnvironment": UPDATE_TEAM_ENVIRONMENT,
    "DeleteTeamEnvironment": DELETE_TEAM_ENVIRONMENT,
}

OPERATIONS = {**QUERIES, **MUTATIONS}

_OPERATION_NAME_RE = re.compile(r"^\s*(query|mutation)\s+([A-Za-z_][A-Za-z0-9_]*)")


def operation_name(document):
    """Return the operation name declared in *document*, or None for anonymous ones."""
    match = _OPERATION_NAME_RE.search(document or "")
    return match.group(2) if match else None
