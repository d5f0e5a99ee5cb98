import asyncio

import pytest

from bitpm import (
    BitId,
    BitIds,
    Component,
    ComponentNotFoundInline,
    Dist,
    IdentityIncomplete,
    Impl,
    InvalidBitId,
    InvalidVersion,
    License,
    Misc,
    Specs,
    SpecsResults,
)
from bitpm.component.sources import Loaded, MiscFile
from bitpm.config import ConsumerBitConfig, load_bit_config

from .stubs import COMPILER_ID, FAILING_RAW, TESTER_ID


@pytest.fixture
def full_component():
    return Component(
        name="foo",
        box="utils",
        version=3,
        scope="myscope",
        impl_file="impl.js",
        specs_file="spec.js",
        misc_files=["README.md"],
        compiler_id=COMPILER_ID,
        tester_id=TESTER_ID,
        dependencies=BitIds([BitId.parse("myscope/utils/bar@1")]),
        package_dependencies={"lodash": "^4.0.0"},
        impl=Impl("/**\n * Foo.\n */\nfunction foo() {}\n"),
        specs=Specs("describe('foo', () => {});"),
        misc=Misc([MiscFile("README.md", Loaded("# foo"))]),
        dist=Dist("var foo;", {"version": 3}),
        specs_results=SpecsResults.create_from_raw(FAILING_RAW),
        license=License("MIT"),
        deprecate="use utils/bar",
    )


def test_object_round_trip(full_component):
    record = full_component.to_object()

    assert Component.from_object(record).to_object() == record


def test_string_round_trip(full_component):
    text = full_component.to_string()

    assert Component.from_string(text).to_object() == full_component.to_object()


def test_record_fields(full_component):
    record = full_component.to_object()

    assert record["version"] == "3"
    assert record["compilerId"] == "plugins/envs/babel@2"
    assert record["dependencies"] == {"myscope/utils/bar@1": True}
    assert record["docs"][0]["name"] == "foo"
    assert record["specsResults"]["pass"] is False


def test_from_object_coerces_version(full_component):
    record = full_component.to_object()

    assert Component.from_object(record).version == 3


@pytest.mark.parametrize("raw, expected", [("1.0", 1), ("2-beta", 2), (" 7", 7), (4.9, 4), ("", None)])
def test_from_object_reads_leading_integer_of_version(raw, expected):
    record = {"name": "foo", "box": "utils", "impl": {"src": "x"}, "version": raw}

    assert Component.from_object(record).version == expected


@pytest.mark.parametrize("raw", ["abc", "v1", True, [1]])
def test_from_object_rejects_malformed_version(raw):
    record = {"name": "foo", "box": "utils", "impl": {"src": "x"}, "version": raw}

    with pytest.raises(InvalidVersion):
        Component.from_object(record)


def test_minimal_record_defaults():
    component = Component.from_object(
        {"name": "foo", "box": "utils", "impl": {"src": "x"}, "version": None}
    )

    assert component.version is None
    assert component.specs is None
    assert component.dist is None
    assert len(component.dependencies) == 0
    assert component.to_object()["compilerId"] is None


def test_id_requires_scope_and_version():
    with pytest.raises(IdentityIncomplete):
        Component(name="foo", box="utils", version=1, impl=Impl("")).id
    with pytest.raises(IdentityIncomplete):
        Component(name="foo", box="utils", scope="s", impl=Impl("")).id


def test_id_rejects_names_that_would_not_parse_back():
    component = Component(name="my comp", box="utils", scope="myscope", version=1, impl=Impl(""))

    with pytest.raises(InvalidBitId):
        component.id


def test_id_is_canonical(component):
    assert component.id.to_string() == "myscope/utils/foo@1"
    assert BitId.parse(component.id.to_string()) == component.id


def test_dependencies_default_to_empty_set():
    assert isinstance(Component(name="foo", impl=Impl("")).dependencies, BitIds)


def test_specs_absent_versus_empty():
    assert Component(name="foo", impl=Impl("")).specs is None
    assert Component(name="foo", impl=Impl(""), specs=Specs("")).specs.src == ""


def test_docs_are_parsed_lazily_once(full_component):
    docs = full_component.docs

    assert docs[0].description == "Foo."
    assert full_component.docs is docs


def test_paths_load_lazily(tmp_path):
    (tmp_path / "impl.js").write_text("impl")
    (tmp_path / "spec.js").write_text("spec")
    component = Component(name="foo", impl=tmp_path / "impl.js", specs=tmp_path / "spec.js")

    assert isinstance(component.impl, Impl)
    assert component.impl is component.impl
    assert component.specs.src == "spec"


def test_write_orders_artifacts(tmp_path, full_component):
    bit_dir = tmp_path / "utils" / "foo"

    full_component.write(bit_dir, with_bit_config=True)

    assert (bit_dir / "impl.js").read_text().startswith("/**")
    assert (bit_dir / "spec.js").exists()
    assert (bit_dir / "README.md").read_text() == "# foo"
    assert (bit_dir / "dist" / "impl.js").read_text() == "var foo;"
    assert (bit_dir / "LICENSE").read_text() == "MIT"
    config = load_bit_config(bit_dir)
    assert config.compiler == "plugins/envs/babel@2"
    assert config.dependencies == {"myscope/utils/bar@1": True}


def test_write_without_force_keeps_first_contents(tmp_path, component):
    component.write(tmp_path)
    Component(name="foo", box="utils", impl=Impl("second")).write(tmp_path, force=False)

    assert (tmp_path / "impl.js").read_text() == "module.exports=1;"


def test_write_with_force_replaces_contents(tmp_path, component):
    component.write(tmp_path)
    Component(name="foo", box="utils", impl=Impl("second")).write(tmp_path, force=True)

    assert (tmp_path / "impl.js").read_text() == "second"


def test_bit_config_uses_sentinel_without_plugins(tmp_path, component):
    component.write(tmp_path, with_bit_config=True)

    config = load_bit_config(tmp_path)
    assert config.compiler == "none"
    assert config.tester == "none"


def test_empty_license_is_not_written(tmp_path, component):
    component.license = License("")
    component.write(tmp_path)

    assert not (tmp_path / "LICENSE").exists()


def test_failed_write_removes_created_directory(tmp_path):
    component = Component(name="foo", impl=tmp_path / "missing.js")
    bit_dir = tmp_path / "out"

    with pytest.raises(FileNotFoundError):
        component.write(bit_dir)

    assert not bit_dir.exists()


def test_load_from_inline(tmp_path):
    bit_dir = tmp_path / "utils" / "foo"
    bit_dir.mkdir(parents=True)
    (bit_dir / "impl.js").write_text("module.exports = 1;")
    (bit_dir / "spec.js").write_text("it('works')")
    (bit_dir / "bit.yaml").write_text(
        "compiler: plugins/envs/babel@2\n"
        "dependencies:\n"
        "  myscope/utils/bar@1: true\n"
    )

    component = Component.load_from_inline(bit_dir, ConsumerBitConfig(tester="plugins/envs/mocha@1"))

    assert component.name == "foo"
    assert component.box == "utils"
    assert component.compiler_id == COMPILER_ID
    assert component.tester_id == TESTER_ID
    assert [str(d) for d in component.dependencies] == ["myscope/utils/bar@1"]
    assert component.impl.src == "module.exports = 1;"
    assert component.specs.src == "it('works')"


def test_load_from_inline_without_specs_file(tmp_path):
    bit_dir = tmp_path / "utils" / "foo"
    bit_dir.mkdir(parents=True)
    (bit_dir / "impl.js").write_text("x")

    assert Component.load_from_inline(bit_dir).specs is None


def test_load_from_missing_directory(tmp_path):
    with pytest.raises(ComponentNotFoundInline):
        Component.load_from_inline(tmp_path / "nope")


def test_create_scaffolds_from_consumer_config():
    config = ConsumerBitConfig(compiler="plugins/envs/babel@2", impl_file="index.js")

    component = asyncio.run(
        Component.create("is-string", "utils", config, scope_name="myscope", with_specs=True)
    )

    assert component.version == 1
    assert component.impl_file == "index.js"
    assert component.compiler_id == COMPILER_ID
    assert component.tester_id is None
    assert "is-string" in component.impl.src
    assert "is-string" in component.specs.src
    assert component.id.to_string() == "myscope/utils/is-string@1"


def test_create_without_specs():
    component = asyncio.run(Component.create("foo", "utils", ConsumerBitConfig()))

    assert component.specs is None
