import pytest

from formulaterms.model_context import (
    ModelContext,
    ModelTrait,
    RegressionModel,
    StatisticalModel,
    as_context_type,
    drop_intercept,
    implicit_intercept,
)


class InterceptFreeModel(StatisticalModel):
    pass


@pytest.fixture
def intercept_free():
    drop_intercept.register(InterceptFreeModel)
    yield InterceptFreeModel
    drop_intercept.unregister(InterceptFreeModel)


def test_as_context_type():
    assert as_context_type(StatisticalModel) is StatisticalModel
    assert as_context_type(StatisticalModel()) is StatisticalModel


def test_builtin_traits():
    assert not implicit_intercept(ModelContext)
    assert implicit_intercept(StatisticalModel)
    assert implicit_intercept(RegressionModel)
    assert implicit_intercept(RegressionModel())

    assert not drop_intercept(ModelContext)
    assert not drop_intercept(StatisticalModel)


def test_registration(intercept_free):
    assert drop_intercept(intercept_free)
    assert drop_intercept(intercept_free())
    assert not drop_intercept(StatisticalModel)

    class Subclass(intercept_free):
        pass

    assert drop_intercept(Subclass)

    drop_intercept.register(Subclass, False)
    assert not drop_intercept(Subclass)
    drop_intercept.unregister(Subclass)
    assert drop_intercept(Subclass)


def test_custom_trait():
    trait = ModelTrait("weighted", default=True)
    assert trait(ModelContext)
    trait.register(RegressionModel, False)
    assert not trait(RegressionModel)
    assert trait(StatisticalModel)
    assert repr(trait) == "<ModelTrait weighted>"

    # Unregistering unknown contexts is a no-op.
    trait.unregister(StatisticalModel)
