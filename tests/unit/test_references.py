"""Tests for lazy file reference resolution."""

from pathlib import Path

import pytest

from blueprint_notation.core import ir
from blueprint_notation.core.errors import LinkError, ParseError
from blueprint_notation.core.parser import parse, parse_file
from blueprint_notation.core.references import ReferenceResolver, candidate_paths


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def reference(path: str) -> ir.FileReference:
    return ir.FileReference(name="User", path=path)


class TestCandidatePaths:
    def test_origin_then_base_dir(self, tmp_path: Path) -> None:
        origin = tmp_path / "specs" / "main.bp"
        paths = candidate_paths(reference("user.bp"), origin, tmp_path)
        assert paths == [tmp_path / "specs" / "user.bp", tmp_path / "user.bp"]

    def test_absolute_used_as_written(self, tmp_path: Path) -> None:
        target = tmp_path / "user.bp"
        assert candidate_paths(reference(str(target)), None, Path("/other")) == [target]

    def test_no_context(self) -> None:
        assert candidate_paths(reference("user.bp"), None, None) == [Path("user.bp")]


class TestResolve:
    def test_resolves_relative_to_document(self, tmp_path: Path) -> None:
        write(tmp_path / "models" / "user.bp", "DataStructure User {\n  id: UUID\n}\n")
        main = write(tmp_path / "main.bp", "DataStructure User found in `models/user.bp`\n")
        document = parse_file(main)

        resolver = ReferenceResolver()
        target = resolver.resolve(document.references[0], main)

        assert target.get("User") is not None

    def test_resolves_under_base_dir(self, tmp_path: Path) -> None:
        write(tmp_path / "user.bp", "DataStructure User {\n  id: UUID\n}\n")
        document = parse("System S {\n  user: User found in `user.bp`\n}")

        resolved = ReferenceResolver(base_dir=tmp_path).resolve_all(document)

        assert list(resolved) == ["User"]

    def test_cached(self, tmp_path: Path) -> None:
        write(tmp_path / "user.bp", "DataStructure User {\n  id: UUID\n}\n")
        resolver = ReferenceResolver(base_dir=tmp_path)

        first = resolver.resolve(reference("user.bp"))
        second = resolver.resolve(reference("./user.bp"))

        assert first is second

    def test_missing_file(self, tmp_path: Path) -> None:
        main = write(tmp_path / "main.bp", "User found in `nowhere.bp`\n")
        document = parse_file(main)

        with pytest.raises(LinkError) as exc_info:
            ReferenceResolver().resolve(document.references[0], main)

        error = exc_info.value
        assert "File reference 'User' not found: nowhere.bp" in error.message
        assert error.context is not None
        assert error.context.line == 1

    def test_parse_error_propagates(self, tmp_path: Path) -> None:
        write(tmp_path / "broken.bp", "Service Broken {\n")

        with pytest.raises(ParseError):
            ReferenceResolver(base_dir=tmp_path).resolve(reference("broken.bp"))


class TestResolveAll:
    def test_follows_nested_references(self, tmp_path: Path) -> None:
        write(tmp_path / "address.bp", "DataStructure Address {\n  city: string\n}\n")
        write(
            tmp_path / "user.bp",
            "Address found in `address.bp`\nDataStructure User {\n  id: UUID\n}\n",
        )
        main = write(tmp_path / "main.bp", "User found in `user.bp`\nSystem S {\n  x: 1\n}\n")

        resolved = ReferenceResolver().resolve_all(parse_file(main))

        assert list(resolved) == ["User", "Address"]
        assert resolved["Address"].get("Address") is not None

    def test_first_resolution_wins(self, tmp_path: Path) -> None:
        write(tmp_path / "a.bp", "Service A {\n  x: 1\n}\n")
        write(tmp_path / "b.bp", "Service B {\n  x: 1\n}\n")
        main = write(
            tmp_path / "main.bp",
            "System S {\n  one: Part found in `a.bp`,\n  two: Part found in `b.bp`\n}\n",
        )

        resolved = ReferenceResolver().resolve_all(parse_file(main))

        assert resolved["Part"].get("A") is not None

    def test_shared_file_is_not_a_cycle(self, tmp_path: Path) -> None:
        write(tmp_path / "common.bp", "DataStructure Id {\n  value: string\n}\n")
        write(tmp_path / "a.bp", "Id found in `common.bp`\nService A {\n  x: 1\n}\n")
        write(tmp_path / "b.bp", "Id found in `common.bp`\nService B {\n  x: 1\n}\n")
        main = write(tmp_path / "main.bp", "A found in `a.bp`\nB found in `b.bp`\n")

        resolved = ReferenceResolver().resolve_all(parse_file(main))

        assert sorted(resolved) == ["A", "B", "Id"]

    def test_cycle(self, tmp_path: Path) -> None:
        write(tmp_path / "a.bp", "B found in `b.bp`\n")
        write(tmp_path / "b.bp", "A found in `a.bp`\n")
        main = write(tmp_path / "main.bp", "A found in `a.bp`\n")

        with pytest.raises(LinkError) as exc_info:
            ReferenceResolver().resolve_all(parse_file(main))

        assert "Circular file reference: a.bp -> b.bp -> a.bp" in exc_info.value.message

    def test_self_reference(self, tmp_path: Path) -> None:
        main = write(tmp_path / "main.bp", "Me found in `main.bp`\n")

        with pytest.raises(LinkError) as exc_info:
            ReferenceResolver().resolve_all(parse_file(main))

        assert "main.bp -> main.bp" in exc_info.value.message

    def test_no_references(self, user_auth: ir.Document) -> None:
        assert ReferenceResolver().resolve_all(user_auth) == {}
