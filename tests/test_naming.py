import pytest

from packinject import Lifetime, parse
from packinject.naming import (
    aggregate_name,
    camel_case,
    capitalize,
    pascal_case,
    scoped_name,
    singular,
)


class TestParse:
    """Test splitting base names into identifier, extension and lifetime."""

    def test_lifetime_tag(self) -> None:
        info = parse("widget.transient.py")
        assert info.identifier == "widget"
        assert info.extension == ".py"
        assert info.lifetime is Lifetime.TRANSIENT

    @pytest.mark.parametrize(
        ("tag", "lifetime"),
        [
            ("singleton", Lifetime.SINGLETON),
            ("si", Lifetime.SINGLETON),
            ("transient", Lifetime.TRANSIENT),
            ("tr", Lifetime.TRANSIENT),
            ("scoped", Lifetime.SCOPED),
            ("sc", Lifetime.SCOPED),
        ],
    )
    def test_tag_aliases(self, tag: str, lifetime: Lifetime) -> None:
        assert parse(f"cache.{tag}.json").lifetime is lifetime

    def test_unknown_tag_stays_in_identifier(self) -> None:
        info = parse("widget.xyz.py")
        assert info.identifier == "widget.xyz"
        assert info.lifetime is None

    def test_tags_are_case_sensitive(self) -> None:
        info = parse("widget.Singleton.py")
        assert info.identifier == "widget.Singleton"
        assert info.lifetime is None

    def test_untagged(self) -> None:
        info = parse("config.json")
        assert info.identifier == "config"
        assert info.extension == ".json"
        assert info.lifetime is None

    def test_directory_has_no_extension(self) -> None:
        info = parse("users", is_directory=True)
        assert info.identifier == "users"
        assert info.extension == ""

    def test_tagged_directory(self) -> None:
        info = parse("sessions.scoped", is_directory=True)
        assert info.identifier == "sessions"
        assert info.lifetime is Lifetime.SCOPED


class TestLogicalNames:
    """Test depth-dependent scoping of logical names."""

    def test_singular(self) -> None:
        assert singular("users") == "user"
        assert singular("user") == "user"
        assert singular("user_repositories") == "user_repository"

    @pytest.mark.parametrize(
        "word", ["address", "status", "class", "bus", "access", "health_status"]
    )
    def test_singular_words_ending_in_s_are_kept(self, word: str) -> None:
        assert singular(word) == word

    def test_child_of_singular_top_level_directory(self) -> None:
        assert scoped_name("home", ("address",)) == "home_address"
        assert aggregate_name("health", ("status",)) == "health_status"

    def test_top_level_name_is_unscoped(self) -> None:
        assert scoped_name("users", ()) == "users"

    def test_child_of_top_level_directory_is_repository_style(self) -> None:
        assert scoped_name("user", ("repositories",)) == "user_repository"

    def test_deeper_names_keep_their_own_form(self) -> None:
        assert scoped_name("users", ("admin", "repositories")) == "users"

    def test_aggregate_name_is_always_scoped(self) -> None:
        assert aggregate_name("mail", ("services",)) == "mail_service"
        assert aggregate_name("smtp", ("mail", "services")) == "smtp_mail_service"


class TestCasing:
    def test_capitalize(self) -> None:
        assert capitalize("user") == "User"
        assert capitalize("") == ""

    def test_camel_case(self) -> None:
        assert camel_case("user_repository") == "userRepository"
        assert camel_case("user-repository") == "userRepository"
        assert camel_case("user repository") == "userRepository"
        assert camel_case("userRepository") == "userRepository"

    def test_pascal_case(self) -> None:
        assert pascal_case("user_repository") == "UserRepository"
