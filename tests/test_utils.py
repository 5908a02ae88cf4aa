import pytest

from servercore.utils import (
    base_path,
    get_random,
    go_up_directories,
    remove_last_path_component,
)

EXE = "C:\\proj\\Build\\Debug\\app.exe"


def test_get_random_int_in_range():
    for _ in range(200):
        value = get_random(1, 6)
        assert isinstance(value, int)
        assert 1 <= value <= 6


def test_get_random_single_value():
    assert get_random(42, 42) == 42


def test_get_random_float_in_range():
    for _ in range(200):
        value = get_random(0.5, 1.5)
        assert isinstance(value, float)
        assert 0.5 <= value <= 1.5


def test_get_random_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        get_random(10, 1)


def test_remove_last_path_component_backslash():
    assert remove_last_path_component(EXE) == "C:\\proj\\Build\\Debug"


def test_remove_last_path_component_slash():
    assert remove_last_path_component("/opt/app/bin/server") == "/opt/app/bin"


def test_remove_last_path_component_without_separator():
    assert remove_last_path_component("server") == "server"


def test_go_up_directories_matches_repeated_removal():
    once = remove_last_path_component(EXE)
    assert go_up_directories(EXE, 2) == remove_last_path_component(once)
    assert go_up_directories(EXE, 3) == "C:\\proj"


def test_go_up_zero_levels_is_identity():
    assert go_up_directories(EXE, 0) == EXE


def test_base_path_debug_and_release():
    assert base_path(EXE, debug=True) == go_up_directories(EXE, 3)
    assert base_path(EXE, debug=False) == remove_last_path_component(EXE)


def test_base_path_defaults_to_running_program():
    result = base_path()
    assert isinstance(result, str) and len(result) > 0
    assert result == remove_last_path_component(result + "/x")