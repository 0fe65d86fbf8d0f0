import pytest

from packinject import ConstructionKind, Container, Lifetime, Registration, ResolutionError


def factory(function: object, lifetime: Lifetime = Lifetime.SINGLETON) -> Registration:
    return Registration(kind=ConstructionKind.FACTORY, lifetime=lifetime, payload=function)


def value(payload: object) -> Registration:
    return Registration(
        kind=ConstructionKind.VALUE, lifetime=Lifetime.SINGLETON, payload=payload
    )


class Counter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.calls


class TestResolve:
    """Test resolving registrations by name."""

    def test_value(self) -> None:
        container = Container().register(greeting=value("Hello"))
        assert container.resolve("greeting") == "Hello"
        assert container["greeting"] == "Hello"
        assert container.greeting == "Hello"

    def test_factory_reads_dependencies_from_options(self) -> None:
        container = Container().register(
            name=value("World"),
            greeting=factory(lambda options: f"Hello, {options.name}!"),
        )
        assert container.greeting == "Hello, World!"

    def test_class_is_instantiated_with_container(self) -> None:
        class Greeter:
            def __init__(self, options: Container) -> None:
                self.name = options["name"]

        container = Container().register(
            name=value("World"),
            greeter=Registration(
                kind=ConstructionKind.CLASS,
                lifetime=Lifetime.TRANSIENT,
                payload=Greeter,
            ),
        )
        assert container.greeter.name == "World"

    def test_unknown_name(self) -> None:
        container = Container()
        with pytest.raises(ResolutionError) as exc_info:
            container.resolve("missing")
        assert exc_info.value.path == ("missing",)
        with pytest.raises(KeyError):
            container["missing"]
        with pytest.raises(AttributeError):
            container.missing

    def test_unknown_dependency_reports_path(self) -> None:
        container = Container().register(
            greeting=factory(lambda options: options.resolve("name"))
        )
        with pytest.raises(ResolutionError) as exc_info:
            container.resolve("greeting")
        assert exc_info.value.path == ("greeting", "name")

    def test_cycle_is_detected(self) -> None:
        container = Container().register(
            first=factory(lambda options: options.second),
            second=factory(lambda options: options.first),
        )
        with pytest.raises(ResolutionError, match="first -> second -> first"):
            container.resolve("first")

    def test_last_registration_wins(self) -> None:
        container = Container().register(greeting=value("Hello"))
        container.register(greeting=value("Hi"))
        assert container.greeting == "Hi"


class TestLifetimes:
    """Test instance reuse per lifetime."""

    def test_singleton_is_built_once(self) -> None:
        counter = Counter()
        container = Container().register(count=factory(counter))
        scope = container.create_scope()
        assert container.count == 1
        assert scope.count == 1
        assert counter.calls == 1

    def test_transient_is_built_per_resolution(self) -> None:
        counter = Counter()
        container = Container().register(count=factory(counter, Lifetime.TRANSIENT))
        assert container.count == 1
        assert container.count == 2

    def test_scoped_is_built_once_per_scope(self) -> None:
        counter = Counter()
        container = Container().register(count=factory(counter, Lifetime.SCOPED))
        first = container.create_scope()
        second = container.create_scope()
        assert first.count == 1
        assert first.count == 1
        assert second.count == 2

    def test_scope_values_shadow_parent(self) -> None:
        container = Container().register(
            user_id=value(0),
            greeting=factory(
                lambda options: f"user {options.user_id}", Lifetime.SCOPED
            ),
        )
        scope = container.create_scope(user_id=42)
        assert scope.greeting == "user 42"
        assert container.greeting == "user 0"


class TestMapping:
    """Test the read-only mapping interface."""

    def test_iteration_includes_parent_names_once(self) -> None:
        container = Container().register(a=value(1), b=value(2))
        scope = container.create_scope(b=3, c=4)
        assert list(scope) == ["b", "c", "a"]
        assert len(scope) == 3
        assert "a" in scope
        assert "z" not in scope

    def test_containers_compare_by_identity(self) -> None:
        counter = Counter()
        first = Container().register(count=factory(counter))
        second = Container().register(count=factory(counter))
        assert first != second
        assert first == first
        assert counter.calls == 0
