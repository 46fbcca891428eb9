"""Request templates for the resource listing operations.

Each builder returns a fresh :class:`GraphQlQuery`; the query text is fixed and
only the variables change between calls.
"""

from __future__ import annotations

from rendish.graphql_client import GraphQlQuery

_ENV_FIELDS = """
fragment envFields on Env {
  id
  name
  language
  isStatic
  __typename
}
"""

_ENVIRONMENT_FIELDS = """
fragment environmentFields on Environment {
  id
  name
  project {
    id
    name
    owner {
      id
      __typename
    }
    __typename
  }
  __typename
}
"""

_SERVICE_FIELDS = """
fragment serviceFields on Service {
  id
  type
  env {
    ...envFields
    __typename
  }
  owner {
    id
    email
    __typename
  }
  name
  slug
  state
  suspenders
  userFacingType
  userFacingTypeSlug
  createdAt
  updatedAt
  sshAddress
  region {
    id
    description
    __typename
  }
  environment {
    ...environmentFields
    __typename
  }
  __typename
}
"""

_ENV_GROUP_FIELDS = """
fragment envGroupFields on EnvGroup {
  id
  name
  ownerId
  createdAt
  updatedAt
  envVars {
    id
    isFile
    key
    value
    __typename
  }
  environment {
    ...environmentFields
    __typename
  }
  __typename
}
"""

TEAMS_FOR_USER = """query teamsForUserMinimal($userId: String!) {
  teamsForUser(userId: $userId) {
    id
    name
    email
    __typename
  }
}
"""

PROJECTS = """query projects($filter: ProjectFilterInput!) {
  projects(filter: $filter) {
    id
    name
    owner {
      id
      __typename
    }
    environments {
      id
      name
      services {
        id
        state
        suspenders
        __typename
      }
      __typename
    }
    __typename
  }
}
"""

SERVICES_FOR_OWNER = (
    """query servicesForOwner($ownerId: String!, $includeSharedServices: Boolean, $emptyEnvironmentOnly: Boolean) {
  servicesForOwner(
    ownerId: $ownerId
    includeSharedServices: $includeSharedServices
    emptyEnvironmentOnly: $emptyEnvironmentOnly
  ) {
    ...serviceFields
    __typename
  }
}
"""
    + _SERVICE_FIELDS
    + _ENV_FIELDS
    + _ENVIRONMENT_FIELDS
)

ENV_GROUPS_FOR_OWNER = (
    """query envGroupsForOwner($ownerId: String!) {
  envGroupsForOwner(ownerId: $ownerId) {
    ...envGroupFields
    __typename
  }
}
"""
    + _ENV_GROUP_FIELDS
    + _ENVIRONMENT_FIELDS
)

ENV_GROUP = (
    """query envGroup($id: String!) {
  envGroup(id: $id) {
    ...envGroupFields
    __typename
  }
}
"""
    + _ENV_GROUP_FIELDS
    + _ENVIRONMENT_FIELDS
)

SERVICES_FOR_ENV_GROUP = (
    """query servicesForEnvGroup($envGroupId: String!) {
  servicesForEnvGroup(envGroupId: $envGroupId) {
    id
    type
    userFacingType
    userFacingTypeSlug
    name
    slug
    env {
      ...envFields
      __typename
    }
    updatedAt
    __typename
  }
}
"""
    + _ENV_FIELDS
)

PROJECT_RESOURCES = (
    """query projectResources($id: String!) {
  project(id: $id) {
    id
    name
    owner {
      id
      __typename
    }
    environments {
      id
      name
      services {
        ...serviceFields
        __typename
      }
      databases {
        id
        name
        status
        suspenders
        __typename
      }
      redises {
        id
        name
        status
        suspenders
        __typename
      }
      envGroups {
        ...envGroupFields
        __typename
      }
      __typename
    }
    __typename
  }
}
"""
    + _SERVICE_FIELDS
    + _ENV_FIELDS
    + _ENVIRONMENT_FIELDS
    + _ENV_GROUP_FIELDS
)

SERVICE_METRICS = """query serviceMetrics($serviceId: String!, $historyMinutes: Int!, $step: Int!) {
  service(id: $serviceId) {
    env {
      id
      language
      name
      __typename
    }
    metrics(historyMinutes: $historyMinutes, step: $step) {
      samples {
        time
        memory
        cpu
        __typename
      }
      __typename
    }
    __typename
  }
}
"""

SERVER_BANDWIDTH = """query serverBandwidth($serverId: String!) {
  server(id: $serverId) {
    id
    bandwidthMB {
      totalMB
      points {
        time
        bandwidthMB
        __typename
      }
      __typename
    }
    __typename
  }
}
"""


def teams_for_user(user_id: str) -> GraphQlQuery:
    return GraphQlQuery("teamsForUserMinimal", TEAMS_FOR_USER, {"userId": user_id})


def projects(owner_id: str) -> GraphQlQuery:
    return GraphQlQuery("projects", PROJECTS, {"filter": {"ownerId": owner_id}})


def services_for_owner(owner_id: str) -> GraphQlQuery:
    return GraphQlQuery("servicesForOwner", SERVICES_FOR_OWNER, {"ownerId": owner_id})


def env_groups_for_owner(owner_id: str) -> GraphQlQuery:
    return GraphQlQuery("envGroupsForOwner", ENV_GROUPS_FOR_OWNER, {"ownerId": owner_id})


def env_group(env_group_id: str) -> GraphQlQuery:
    return GraphQlQuery("envGroup", ENV_GROUP, {"id": env_group_id})


def services_for_env_group(env_group_id: str) -> GraphQlQuery:
    return GraphQlQuery(
        "servicesForEnvGroup", SERVICES_FOR_ENV_GROUP, {"envGroupId": env_group_id}
    )


def project_resources(project_id: str) -> GraphQlQuery:
    return GraphQlQuery("projectResources", PROJECT_RESOURCES, {"id": project_id})


def service_metrics(service_id: str, history_minutes: int, step: int) -> GraphQlQuery:
    return GraphQlQuery(
        "serviceMetrics",
        SERVICE_METRICS,
        {"serviceId": service_id, "historyMinutes": history_minutes, "step": step},
    )


def server_bandwidth(service_id: str) -> GraphQlQuery:
    return GraphQlQuery("serverBandwidth", SERVER_BANDWIDTH, {"serverId": service_id})
