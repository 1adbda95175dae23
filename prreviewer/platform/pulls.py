"""Pull requests resource client."""

from typing import TYPE_CHECKING, Any

from prreviewer.exceptions import PlatformError
from prreviewer.types.platform import PullFile, PullRequest

if TYPE_CHECKING:
    from prreviewer.platform.transport import HTTPTransport

_PAGE_SIZE = 100


class PullsClient:
    """Client for reading pull requests."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the pulls client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get(self, owner: str, repo: str, number: int) -> PullRequest:
        """
        Get pull request information.

        Raises:
            NotFoundError: If pull request not found
        """
        data = self.transport.request("GET", f"/repos/{owner}/{repo}/pulls/{number}")
        return parse_pull_request(data or {})

    def list_files(
        self,
        owner: str,
        repo: str,
        number: int,
        limit: int | None = None,
    ) -> list[PullFile]:
        """
        List the files changed by a pull request, in platform order.

        Pages are fetched until `limit` files are gathered or a short page
        signals the end of the listing.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number
            limit: Maximum number of files to return (None for all)

        Returns:
            List of PullFile objects
        """
        files: list[PullFile] = []
        page = 1
        while limit is None or len(files) < limit:
            data = self.transport.request(
                "GET",
                f"/repos/{owner}/{repo}/pulls/{number}/files",
                params={"per_page": _PAGE_SIZE, "page": page},
            )
            batch = data or []
            if not isinstance(batch, list):
                raise PlatformError("INVALID_RESPONSE", "Files listing is not a JSON array")
            files.extend(parse_pull_file(item) for item in batch)
            if len(batch) < _PAGE_SIZE:
                break
            page += 1

        if limit is not None:
            return files[:limit]
        return files


def parse_pull_request(data: dict[str, Any]) -> PullRequest:
    """
    Parse pull request data from an API response or event payload.

    Raises:
        PlatformError: If the data is not shaped like a pull request
    """
    try:
        head = data.get("head") or {}
        base = data.get("base") or {}
        number = data["number"]
        if not isinstance(number, int):
            raise TypeError(f"number is {type(number).__name__}")
        return PullRequest(
            number=number,
            title=data.get("title") or "",
            body=data.get("body"),
            user_login=(data.get("user") or {}).get("login") or "",
            base_ref=base.get("ref") or "",
            head_ref=head.get("ref") or "",
            head_sha=head.get("sha") or "",
            labels=[label["name"] for label in data.get("labels") or [] if label.get("name")],
            assignees=[user["login"] for user in data.get("assignees") or [] if user.get("login")],
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise PlatformError("INVALID_RESPONSE", f"Malformed pull request data: {e!r}") from e


def parse_pull_file(data: dict[str, Any]) -> PullFile:
    """
    Parse one entry of the pull request files listing.

    Raises:
        PlatformError: If the entry has no filename or is not an object
    """
    try:
        filename = data["filename"]
        if not isinstance(filename, str) or not filename:
            raise TypeError("filename is not a non-empty string")
        return PullFile(
            filename=filename,
            status=data.get("status") or "modified",
            additions=data.get("additions") or 0,
            deletions=data.get("deletions") or 0,
            patch=data.get("patch"),
            blob_url=data.get("blob_url"),
            raw_url=data.get("raw_url"),
            previous_filename=data.get("previous_filename"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise PlatformError("INVALID_RESPONSE", f"Malformed changed-file entry: {e!r}") from e
