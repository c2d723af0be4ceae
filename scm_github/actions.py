"""The closed set of GitHub REST actions the adapter may issue."""

from enum import Enum
from typing import Any
from urllib.parse import quote


class RemoteAction(Enum):
    """
    A named GitHub call: HTTP method plus path template.

    Path placeholders are filled from the command params; any params left over
    are sent as the query string (GET) or JSON body (POST).
    """

    GET_REPO_BY_ID = ("GET", "/repositories/{id}")
    GET_REPO = ("GET", "/repos/{user}/{repo}")
    GET_BRANCH = ("GET", "/repos/{user}/{repo}/branches/{branch}")
    GET_CONTENT = ("GET", "/repos/{user}/{repo}/contents/{path}")
    CREATE_STATUS = ("POST", "/repos/{user}/{repo}/statuses/{sha}")
    GET_COMMIT = ("GET", "/repos/{user}/{repo}/commits/{sha}")
    GET_USER = ("GET", "/users/{username}")

    def __init__(self, method: str, path_template: str) -> None:
        self.method = method
        self.path_template = path_template

    @property
    def path_params(self) -> tuple[str, ...]:
        return tuple(
            part[1:-1]
            for part in self.path_template.split("/")
            if part.startswith("{")
        )

    @classmethod
    def from_name(cls, name: "str | RemoteAction") -> "RemoteAction":
        """
        Look up an action by member name (e.g. ``"GET_REPO"``).

        Raises:
            ValueError: For a name outside the action set
        """
        if isinstance(name, cls):
            return name
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown remote action: {name!r}") from None

    def build_request(
        self, params: dict[str, Any]
    ) -> tuple[str, str, dict[str, Any]]:
        """
        Split params into ``(method, path, remainder)``.

        Raises:
            ValueError: If a path placeholder has no value
        """
        missing = [name for name in self.path_params if params.get(name) in (None, "")]
        if missing:
            raise ValueError(
                f"{self.name} requires params: {', '.join(missing)}"
            )

        # Only a file path keeps its slashes; "#" and "?" are always escaped.
        path = self.path_template.format(
            **{
                name: quote(str(params[name]), safe="/" if name == "path" else "")
                for name in self.path_params
            }
        )
        remainder = {
            key: value
            for key, value in params.items()
            if key not in self.path_params and value is not None
        }
        return self.method, path, remainder
