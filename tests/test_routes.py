"""Unit tests for named route resolution."""

from formbinder.routes import RouteResolver, decode_template


class TestRouteResolver:
    """Test route name and placeholder handling."""

    def test_unknown_name_is_literal_url(self):
        resolver = RouteResolver({"users.index": "/users"})
        assert resolver.resolve("/api/save") == "/api/save"
        assert resolver.has("/api/save") is False

    def test_registered_name(self):
        resolver = RouteResolver({"users.index": "/users"})
        assert resolver.has("users.index") is True
        assert resolver.resolve("users.index") == "/users"

    def test_mapping_parameters(self):
        resolver = RouteResolver({"posts.comment": "/posts/{post}/comments/{comment}"})
        url = resolver.resolve("posts.comment", {"post": 3, "comment": 9})
        assert url == "/posts/3/comments/9"

    def test_scalar_parameter_is_id_shorthand(self):
        resolver = RouteResolver({"users.show": "/users/{id}"})
        assert resolver.resolve("users.show", 42) == "/users/42"
        assert resolver.resolve("users.show", "ada") == "/users/ada"

    def test_percent_encoded_template_is_decoded(self):
        resolver = RouteResolver({"users.show": "/users/%7Bid%7D"})
        assert resolver.resolve("users.show", 5) == "/users/5"

    def test_only_first_occurrence_substituted(self):
        resolver = RouteResolver({"pair": "/{id}/{id}"})
        assert resolver.resolve("pair", 1) == "/1/{id}"

    def test_placeholders_in_literal_url(self):
        resolver = RouteResolver()
        assert resolver.resolve("/teams/{team}", {"team": "core"}) == "/teams/core"

    def test_unused_parameters_ignored(self):
        resolver = RouteResolver({"users.index": "/users"})
        assert resolver.resolve("users.index", {"page": 2}) == "/users"


class TestDecodeTemplate:
    """Test percent-decoding of stored templates."""

    def test_braces_decoded(self):
        assert decode_template("/users/%7Bid%7D") == "/users/{id}"

    def test_reserved_escapes_kept(self):
        """Should keep escapes that would change the URL's structure."""
        assert decode_template("/a%2Fb%3Fc%23d") == "/a%2Fb%3Fc%23d"

    def test_multibyte_escape_decoded(self):
        assert decode_template("/caf%C3%A9") == "/café"

    def test_resolved_route_keeps_encoded_slash(self):
        resolver = RouteResolver({"files.show": "/files/a%2Fb/%7Bid%7D"})
        assert resolver.resolve("files.show", 3) == "/files/a%2Fb/3"
