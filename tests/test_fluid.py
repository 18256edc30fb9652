from cubecore.fluid import FluidState, RawFluid, Settings


def test_settings_defaults():
    settings = Settings()
    assert settings.random_ticks is False
    assert settings.is_empty is False


def test_raw_fluid_keeps_settings_and_states():
    settings = Settings(random_ticks=True)
    states = ["level=0", "level=1"]
    fluid = RawFluid(settings, states)
    assert fluid.settings is settings
    assert fluid.states is states


def test_fluid_state_identity_equality():
    state = {"level": 8}
    twin = {"level": 8}
    assert FluidState("water", state) == FluidState("water", state)
    assert FluidState("water", state) != FluidState("water", twin)
    assert FluidState("water", state) != FluidState("lava", state)


def test_fluid_state_hashing():
    state = {"level": 8}
    a = FluidState("water", state)
    b = FluidState("water", state)
    assert hash(a) == hash(b)
    assert len({a, b, FluidState("lava", state)}) == 2


def test_fluid_state_not_equal_to_other_types():
    state = object()
    assert FluidState("water", state) != ("water", state)