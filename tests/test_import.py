import pytest

from hostscope import (
    ArgumentError, BinderSession, Environment, HostFunction, InvocationError, SymbolNotFound,
)


def do_import(session, target, namespace):
    return session.root["$import"](target, namespace)


def assert_models_members(env):
    assert sorted(env) == ["VERSION", "fail", "make_point", "registry", "total"]
    assert env["VERSION"] == "1.2"
    assert isinstance(env["total"], HostFunction)


def test_import_default_target_creates_child(session):
    assert do_import(session, "", "app/models") == []
    child = session.root["models"]
    assert isinstance(child, Environment)
    assert_models_members(child)
    # nothing leaked into the root
    assert "VERSION" not in session.root


def test_import_named_target(session):
    do_import(session, "m", "app/models")
    assert_models_members(session.root["m"])
    assert "models" not in session.root


def test_import_merge_into_root(session):
    before = set(session.root)
    do_import(session, ".", "app/models")
    assert set(session.root) - before == {"VERSION", "fail", "make_point", "registry", "total"}
    assert session.root["VERSION"] == "1.2"


def test_import_discard_binds_nothing(session):
    before = dict(session.root)
    do_import(session, "_", "app/models")
    assert dict(session.root) == before


def test_import_skips_non_identifiers_and_synthetic_names(session):
    do_import(session, "", "app/models")
    child = session.root["models"]
    assert "Point.origin" not in child
    assert "Point.norm1" not in child
    assert "Point" not in child


def test_globals_are_snapshots(session, fake_symbols):
    do_import(session, "", "app/models")
    fake_symbols._globals["app/models.VERSION"] = "2.0"
    assert session.root["models"]["VERSION"] == "1.2"
    do_import(session, "", "app/models")
    assert session.root["models"]["VERSION"] == "2.0"


def test_imported_function_matches_call(session):
    do_import(session, "", "app/models")
    total = session.root["models"]["total"]
    assert total(4, 5) == session.root["call"]("app/models", "total", 4, 5) == [9]
    render_env = session.import_namespace("app/views")
    assert render_env["render"]("x") == session.root["call"]("app/views", "render", "x")


def test_imported_function_calls_captured_name(session, fake_symbols):
    do_import(session, "m", "app/models")
    session.root["m"]["make_point"](1, 2)
    assert fake_symbols.calls[-1] == ("app/models.make_point", (1, 2))


def test_imported_function_errors(session):
    do_import(session, "", "app/models")
    with pytest.raises(InvocationError, match="boom"):
        session.root["models"]["fail"]()


def test_function_wins_over_global_with_same_name(fake_symbols):
    fake_symbols._globals["app/models.total"] = "shadowed"
    with BinderSession(fake_symbols) as s:
        env = s.import_namespace("app/models")
        assert isinstance(env["total"], HostFunction)


def test_reimport_overwrites(session):
    do_import(session, "", "app/models")
    first = session.root["models"]
    do_import(session, "", "app/models")
    assert session.root["models"] is not first


def test_import_unknown_namespace_binds_empty_child(session):
    do_import(session, "", "app/nowhere")
    assert len(session.root["nowhere"]) == 0


def test_failed_import_leaves_root_untouched(session, fake_symbols):
    fake_symbols.unresolvable.add("app/models.registry")
    before = dict(session.root)
    for target in ("", ".", "m"):
        with pytest.raises(SymbolNotFound):
            do_import(session, target, "app/models")
        assert dict(session.root) == before


def test_failed_enumeration_aborts(session, fake_symbols):
    fake_symbols.broken = True
    with pytest.raises(RuntimeError):
        do_import(session, "", "app/models")
    assert "models" not in session.root


def test_discard_still_reports_failures(session, fake_symbols):
    fake_symbols.unresolvable.add("app/models.VERSION")
    with pytest.raises(SymbolNotFound):
        do_import(session, "_", "app/models")


@pytest.mark.parametrize(
    "args,message",
    [
        (("app/models",), "2 arguments"),
        (("", "app/models", "x"), "2 arguments"),
        ((None, "app/models"), "target name"),
        (("", 5), "namespace name"),
    ],
)
def test_import_argument_errors(session, args, message):
    with pytest.raises(ArgumentError, match=message):
        session.root["$import"](*args)


def test_import_from_process(fixture_module):
    with BinderSession() as s:
        s.root["$import"]("", "hsfixture/geometry")
        geometry = s.root["geometry"]
        assert geometry["SCALE"] == 3
        assert geometry["label"] == "geometry"
        assert geometry["scale"](2) == [6]
        assert "ctypes" not in geometry
        assert "Point" not in geometry
