from typing import TYPE_CHECKING, Iterator, Protocol

if TYPE_CHECKING:
    import astroid  # type: ignore[import-untyped]

    from encapsulation_linter.domain.entities import MemberKind, TransformationPlan


class AstroidProtocol(Protocol):
    """Symbol facility: turns class-body bindings into members."""

    def parse_file(self, file_path: str) -> "astroid.nodes.Module":
        ...

    def member_kind(self, node: "astroid.nodes.AssignName") -> "MemberKind":
        ...

    def iter_class_fields(
        self, node: "astroid.nodes.NodeNG"
    ) -> Iterator[tuple["MemberKind", "astroid.nodes.AssignName"]]:
        ...


class FixerGatewayProtocol(Protocol):
    """Protocol for applying code fixes. Implementers accept only TransformationPlan at boundary."""

    def apply_fixes(self, file_path: str, fixes: list["TransformationPlan"]) -> bool:
        """Apply a list of transformation plans to a file. Returns True if modified."""
        ...

    def preview(self, file_path: str, fixes: list["TransformationPlan"]) -> str:
        """Return the source the file would have after applying `fixes`."""
        ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python source and stub files in path (recursive if directory)."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...

    def copy_file(self, src: str, dst: str) -> None:
        ...

    def remove_file(self, path: str) -> None:
        ...
