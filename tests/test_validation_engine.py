from __future__ import annotations

from contract.models import Package, ViolationType
from enforce.validation import INLINE_ALLOWLIST_SOURCE, validate_packages
from rules.config import LayerDefinition, StratifyConfig


def _config(layers: dict[str, dict[str, object]] | None = None) -> StratifyConfig:
    if layers is None:
        layers = {
            "ui": {"allowedDependencies": ["core"]},
            "core": {"allowedDependencies": ["infra"]},
            "infra": {"allowedDependencies": []},
        }
    return StratifyConfig.model_validate({"layers": layers})


def _package(
    name: str,
    layer: str | None = "core",
    dependencies: tuple[str, ...] = (),
) -> Package:
    short = name.rsplit("/", 1)[-1]
    return Package(
        name=name,
        path=f"packages/{short}/package.json",
        layer=layer,
        dependencies=dependencies,
    )


def test_compliant_layer_chain_has_no_violations() -> None:
    packages = [
        _package("@app/ui", "ui", ("@app/core",)),
        _package("@app/core", "core", ("@app/infra",)),
        _package("@app/infra", "infra"),
    ]

    assert validate_packages(packages, _config()) == []


def test_disallowed_dependency_reports_invalid_dependency() -> None:
    packages = [
        _package("@app/ui", "ui", ("@app/infra",)),
        _package("@app/infra", "infra"),
    ]

    violations = validate_packages(packages, _config())

    assert len(violations) == 1
    violation = violations[0]
    assert violation.type is ViolationType.INVALID_DEPENDENCY
    assert violation.package == "@app/ui"
    assert violation.details is not None
    assert violation.details.from_layer == "ui"
    assert violation.details.to_package == "@app/infra"
    assert violation.details.to_layer == "infra"
    assert violation.details.allowed_layers == ["core"]


def test_missing_layer_reported_with_longer_detail() -> None:
    violations = validate_packages([_package("@app/no-layer", None)], _config())

    assert len(violations) == 1
    violation = violations[0]
    assert violation.type is ViolationType.MISSING_LAYER
    assert violation.package == "@app/no-layer"
    assert "missing" in violation.message
    assert len(violation.detailed_message) > len(violation.message)
    assert "Missing Layer" in violation.detailed_message
    assert "@app/no-layer" in violation.detailed_message
    assert "packages/no-layer/package.json" in violation.detailed_message
    assert violation.details is None


def test_empty_layer_string_is_missing_layer() -> None:
    violations = validate_packages([_package("@app/blank", "")], _config())

    assert [v.type for v in violations] == [ViolationType.MISSING_LAYER]


def test_unknown_layer_lists_every_valid_layer() -> None:
    violations = validate_packages([_package("@app/mystery", "data")], _config())

    assert len(violations) == 1
    violation = violations[0]
    assert violation.type is ViolationType.UNKNOWN_LAYER
    assert violation.package == "@app/mystery"
    assert "ui, core, infra" in violation.message
    assert "ui, core, infra" in violation.detailed_message
    assert "packages/mystery/package.json" in violation.detailed_message
    assert violation.details is None


def test_unauthorized_member_skips_dependency_checks() -> None:
    config = _config(
        {
            "legacy": {"allowedDependencies": [], "allowedPackages": ["@app/old"]},
            "ui": {"allowedDependencies": []},
        }
    )
    packages = [
        _package("@app/new", "legacy", ("@app/ui",)),
        _package("@app/ui", "ui"),
    ]
    allowed = {"legacy": frozenset({"@app/old"})}

    violations = validate_packages(packages, config, allowed)

    assert len(violations) == 1
    violation = violations[0]
    assert violation.type is ViolationType.UNAUTHORIZED_LAYER_MEMBER
    assert violation.package == "@app/new"
    assert violation.details is not None
    assert violation.details.from_layer == "legacy"
    assert violation.details.allowed_packages_source == INLINE_ALLOWLIST_SOURCE
    assert "packages/new/package.json" in violation.detailed_message


def test_unauthorized_member_names_allowlist_file() -> None:
    config = _config(
        {
            "legacy": {
                "allowedDependencies": ["*"],
                "allowedPackagesFile": "config/legacy-packages.json",
            }
        }
    )

    violations = validate_packages(
        [_package("@app/new", "legacy")],
        config,
        {"legacy": frozenset({"@app/old"})},
    )

    assert violations[0].details is not None
    assert violations[0].details.allowed_packages_source == "config/legacy-packages.json"
    assert "config/legacy-packages.json" in violations[0].detailed_message


def test_listed_member_is_checked_for_dependencies() -> None:
    config = _config(
        {
            "legacy": {"allowedDependencies": ["core"], "allowedPackages": ["@app/old"]},
            "core": {"allowedDependencies": []},
            "ui": {"allowedDependencies": []},
        }
    )
    packages = [
        _package("@app/old", "legacy", ("@app/core", "@app/ui")),
        _package("@app/core", "core"),
        _package("@app/ui", "ui"),
    ]

    violations = validate_packages(packages, config, {"legacy": frozenset({"@app/old"})})

    assert [(v.type, v.details.to_package if v.details else None) for v in violations] == [
        (ViolationType.INVALID_DEPENDENCY, "@app/ui")
    ]


def test_layer_without_index_entry_is_unrestricted() -> None:
    config = _config(
        {"legacy": {"allowedDependencies": [], "allowedPackages": ["@app/old"]}}
    )

    violations = validate_packages([_package("@app/new", "legacy")], config)

    assert violations == []


def test_empty_index_entry_rejects_every_member() -> None:
    violations = validate_packages(
        [_package("@app/core", "core")], _config(), {"core": frozenset()}
    )

    assert [v.type for v in violations] == [ViolationType.UNAUTHORIZED_LAYER_MEMBER]


def test_multiple_invalid_dependencies_follow_dependency_order() -> None:
    packages = [
        _package("@app/infra", "infra", ("@app/ui", "@app/core", "@app/infra2")),
        _package("@app/ui", "ui"),
        _package("@app/core", "core"),
        _package("@app/infra2", "infra"),
    ]

    violations = validate_packages(packages, _config())

    assert [v.details.to_package for v in violations if v.details] == [
        "@app/ui",
        "@app/core",
        "@app/infra2",
    ]
    assert all(v.package == "@app/infra" for v in violations)


def test_unresolved_and_layerless_dependencies_are_skipped() -> None:
    packages = [
        _package("@app/ui", "ui", ("@external/lib", "@app/loose")),
        _package("@app/loose", None),
    ]

    violations = validate_packages(packages, _config())

    assert [(v.type, v.package) for v in violations] == [
        (ViolationType.MISSING_LAYER, "@app/loose")
    ]


def test_dependency_on_unknown_layer_package_is_checked() -> None:
    packages = [
        _package("@app/ui", "ui", ("@app/mystery",)),
        _package("@app/mystery", "data"),
    ]

    violations = validate_packages(packages, _config())

    assert [(v.type, v.package) for v in violations] == [
        (ViolationType.INVALID_DEPENDENCY, "@app/ui"),
        (ViolationType.UNKNOWN_LAYER, "@app/mystery"),
    ]


def test_wildcard_layer_may_depend_on_anything() -> None:
    config = _config(
        {
            "app": {"allowedDependencies": ["*"]},
            "core": {"allowedDependencies": []},
        }
    )
    packages = [
        _package("@app/shell", "app", ("@app/core", "@app/weird")),
        _package("@app/core", "core"),
        _package("@app/weird", "nowhere"),
    ]

    violations = validate_packages(packages, config)

    assert [(v.type, v.package) for v in violations] == [
        (ViolationType.UNKNOWN_LAYER, "@app/weird")
    ]


def test_layerless_package_produces_only_missing_layer() -> None:
    packages = [_package("@app/orphan", None, ("@app/ui",)), _package("@app/ui", "ui")]

    violations = validate_packages(packages, _config(), {"core": frozenset()})

    assert [(v.type, v.package) for v in violations] == [
        (ViolationType.MISSING_LAYER, "@app/orphan")
    ]


def test_violations_follow_package_order() -> None:
    packages = [
        _package("@app/a", None),
        _package("@app/b", "data"),
        _package("@app/c", "ui", ("@app/d",)),
        _package("@app/d", "infra"),
    ]

    violations = validate_packages(packages, _config())

    assert [v.package for v in violations] == ["@app/a", "@app/b", "@app/c"]
    assert [v.type for v in violations] == [
        ViolationType.MISSING_LAYER,
        ViolationType.UNKNOWN_LAYER,
        ViolationType.INVALID_DEPENDENCY,
    ]


def test_every_detailed_message_is_longer_and_multiline() -> None:
    config = _config(
        {
            "ui": {"allowedDependencies": []},
            "legacy": {"allowedDependencies": [], "allowedPackages": ["@app/old"]},
        }
    )
    packages = [
        _package("@app/a", None),
        _package("@app/b", "data"),
        _package("@app/c", "ui", ("@app/d",)),
        _package("@app/d", "ui"),
        _package("@app/e", "legacy"),
    ]

    violations = validate_packages(packages, config, {"legacy": frozenset({"@app/old"})})

    assert len(violations) == 4
    for violation in violations:
        assert "\n" not in violation.message
        assert "\n" in violation.detailed_message
        assert len(violation.detailed_message) > len(violation.message)
        assert "Fix:" in violation.detailed_message


def test_validation_is_idempotent() -> None:
    packages = [
        _package("@app/a", None),
        _package("@app/b", "data"),
        _package("@app/c", "ui", ("@app/d", "@app/e")),
        _package("@app/d", "infra"),
        _package("@app/e", "ui"),
    ]
    config = _config()

    first = validate_packages(packages, config)
    second = validate_packages(packages, config)

    assert first == second
    assert [v.to_dict() for v in first] == [v.to_dict() for v in second]


def test_allowed_layers_is_configured_list() -> None:
    config = StratifyConfig(
        layers={
            "ui": LayerDefinition(allowed_dependencies=["core", "shared", "core"]),
            "infra": LayerDefinition(),
        }
    )
    packages = [_package("@app/ui", "ui", ("@app/infra",)), _package("@app/infra", "infra")]

    violations = validate_packages(packages, config)

    assert violations[0].details is not None
    assert violations[0].details.allowed_layers == ["core", "shared", "core"]


def test_unknown_layer_with_no_configured_layers_prints_empty_list() -> None:
    [violation] = validate_packages([_package("@app/x", "core")], _config({}))

    assert violation.type == ViolationType.UNKNOWN_LAYER
    assert violation.message == 'Package "@app/x" has unknown layer "core". Valid layers: '
    assert "(none)" not in violation.detailed_message
