"""Unit tests for the security headers configuration."""

import pytest

from servekit.config.security_headers import (
    DEFAULT_CONTENT_SECURITY_POLICY,
    DEFAULT_PERMISSIONS_POLICY,
    StrictTransportSecurity,
    default_hsts,
    default_security_headers_config,
    security_headers_config_to_options,
    with_hsts_exclude_subdomains,
    with_hsts_max_age,
    with_hsts_preload,
    with_security_headers_csp,
    with_security_headers_csp_report_only,
    with_security_headers_exempt_paths,
    with_security_headers_hsts,
    with_security_headers_server,
    with_security_headers_x_frame_options,
)


@pytest.mark.unit
class TestSecurityHeadersConfig:
    """Test security header defaults and options."""

    def test_defaults(self) -> None:
        """Test the locked-down default profile."""
        config = default_security_headers_config()

        assert config.content_security_policy == DEFAULT_CONTENT_SECURITY_POLICY
        assert config.content_security_policy_report_only is False
        assert config.cross_origin_embedder_policy == "require-corp"
        assert config.cross_origin_opener_policy == "same-origin"
        assert config.cross_origin_resource_policy == "same-origin"
        assert config.permissions_policy == DEFAULT_PERMISSIONS_POLICY
        assert config.referrer_policy == "no-referrer"
        assert config.server == ""
        assert config.strict_transport_security == default_hsts()
        assert config.x_content_type_options == "nosniff"
        assert config.x_frame_options == "DENY"
        assert config.exempt_paths == []

    def test_default_policies_content(self) -> None:
        """Test the default CSP and permissions policy deny by default."""
        assert DEFAULT_CONTENT_SECURITY_POLICY.startswith("default-src 'none';")
        assert "camera=()" in DEFAULT_PERMISSIONS_POLICY
        assert "xr-spatial-tracking=()" in DEFAULT_PERMISSIONS_POLICY

    def test_scalar_options(self) -> None:
        """Test scalar options replace their fields."""
        config = default_security_headers_config().apply(
            with_security_headers_csp("default-src 'self'"),
            with_security_headers_csp_report_only(True),
            with_security_headers_server("servekit"),
            with_security_headers_x_frame_options("SAMEORIGIN"),
            with_security_headers_exempt_paths(None),
        )

        assert config.content_security_policy == "default-src 'self'"
        assert config.content_security_policy_report_only is True
        assert config.server == "servekit"
        assert config.x_frame_options == "SAMEORIGIN"
        assert config.exempt_paths is None

    def test_hsts_option_starts_from_defaults(self) -> None:
        """Test HSTS options do not accumulate across calls."""
        config = default_security_headers_config().apply(
            with_security_headers_hsts(
                with_hsts_max_age(31536000), with_hsts_preload(True)
            ),
            with_security_headers_hsts(with_hsts_exclude_subdomains(True)),
        )

        assert config.strict_transport_security == StrictTransportSecurity(
            max_age=0, exclude_subdomains=True, preload=False
        )

    def test_converter_reproduces_config(self) -> None:
        """Test converting to options and back yields an equal config."""
        config = default_security_headers_config().apply(
            with_security_headers_server("api"),
            with_security_headers_hsts(with_hsts_max_age(600), with_hsts_preload(True)),
            with_security_headers_exempt_paths(["/metrics"]),
        )

        rebuilt = default_security_headers_config().apply(
            *security_headers_config_to_options(config)
        )

        assert rebuilt == config


@pytest.mark.unit
class TestStrictTransportSecurity:
    """Test HSTS header rendering."""

    @pytest.mark.parametrize(
        ("hsts", "expected"),
        [
            (
                StrictTransportSecurity(max_age=31536000),
                "max-age=31536000; includeSubDomains",
            ),
            (
                StrictTransportSecurity(max_age=60, exclude_subdomains=True),
                "max-age=60",
            ),
            (
                StrictTransportSecurity(max_age=60, preload=True),
                "max-age=60; includeSubDomains; preload",
            ),
            (
                StrictTransportSecurity(
                    max_age=60, exclude_subdomains=True, preload=True
                ),
                "max-age=60; preload",
            ),
        ],
    )
    def test_header_value(self, hsts: StrictTransportSecurity, expected: str) -> None:
        """Test directive rendering."""
        assert hsts.header_value() == expected

    def test_default_is_disabled(self) -> None:
        """Test the default HSTS has a zero max-age."""
        hsts = default_hsts()

        assert hsts.max_age == 0
        assert hsts.exclude_subdomains is False
        assert hsts.preload is False
