"""GraphQL queries for the GitHub API.

These are stored in a separate file to keep the implementation code clean
and make the queries easier to read and maintain.
"""

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

# Query to fetch the open pull requests of one repository, with everything
# needed to classify them by role and render the details panel
REPOSITORY_PULL_REQUESTS_QUERY = """query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    name
    url
    pullRequests(first: 100, states: OPEN, orderBy: {field: UPDATED_AT, direction: DESC}) {
      nodes {
        number
        title
        url
        body
        state
        isDraft
        updatedAt
        baseRefName
        headRefName
        author { login }
        labels(first: 20) {
          nodes { name }
        }
        assignees(first: 20) {
          nodes { login }
        }
        reviewRequests(first: 20) {
          nodes {
            requestedReviewer {
              ... on User { login }
              ... on Team { slug }
            }
          }
        }
        reviews(first: 50) {
          nodes {
            author { login }
            state
            submittedAt
          }
        }
      }
    }
  }
}"""
