"""Pull request data source abstraction for testability."""

from abc import ABC, abstractmethod

from gitme.gateway.github.types import PullRequest, RepositoryId, Role


class PrDataSource(ABC):
    """Abstract interface for fetching open pull requests by role."""

    @abstractmethod
    async def fetch(
        self, role: Role, repository: RepositoryId, username: str
    ) -> list[PullRequest]:
        """Fetch the open pull requests of one repository matching a role.

        Args:
            role: Which relationship to the user the pull requests must have
            repository: Repository to query
            username: GitHub login of the tracked user

        Returns:
            Pull requests of the repository that match the role

        Raises:
            FetchError: If the repository could not be fetched
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the data source."""
        return None
