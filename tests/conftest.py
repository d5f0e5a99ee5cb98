import pytest

from bitpm import Component, Impl

from .stubs import COMPILER_ID, TESTER_ID, StubCompiler, StubScope


@pytest.fixture
def compiler():
    return StubCompiler()


@pytest.fixture
def scope(compiler):
    return StubScope(
        {str(COMPILER_ID): compiler, str(TESTER_ID): object()}
    )


@pytest.fixture
def component():
    return Component(
        name="foo",
        box="utils",
        version=1,
        scope="myscope",
        impl=Impl("module.exports=1;"),
    )
