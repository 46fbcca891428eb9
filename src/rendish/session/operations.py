"""Request templates for the two-step sign-in.

Both mutations answer an ``AuthResult``: ``{idToken, expiresAt, user}``.
"""

from __future__ import annotations

from rendish.graphql_client import GraphQlQuery

_USER_FIELDS = """
fragment userFields on User {
  id
  active
  createdAt
  email
  featureFlags
  githubId
  gitlabId
  googleId
  name
  notifyOnPrUpdate
  otpEnabled
  passwordExists
  tosAcceptedAt
  intercomEmailHMAC
  __typename
}
"""

_AUTH_RESULT_FIELDS = """
fragment authResultFields on AuthResult {
  idToken
  expiresAt
  user {
    ...userFields
    sudoModeExpiresAt
    __typename
  }
  readOnly
  __typename
}
"""

SIGN_IN = (
    """mutation signIn($email: String!, $password: String!) {
  signIn(email: $email, password: $password) {
    ...authResultFields
    __typename
  }
}
"""
    + _AUTH_RESULT_FIELDS
    + _USER_FIELDS
)

VERIFY_ONE_TIME_PASSWORD = (
    """mutation verifyOneTimePassword($code: String!) {
  verifyOneTimePassword(code: $code) {
    ...authResultFields
    __typename
  }
}
"""
    + _AUTH_RESULT_FIELDS
    + _USER_FIELDS
)


def sign_in(email: str, password: str) -> GraphQlQuery:
    return GraphQlQuery("signIn", SIGN_IN, {"email": email, "password": password})


def verify_one_time_password(code: str) -> GraphQlQuery:
    return GraphQlQuery("verifyOneTimePassword", VERIFY_ONE_TIME_PASSWORD, {"code": code})


