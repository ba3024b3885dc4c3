import pytest

from ripcheck.detection.window import SampleWindow


def test_window_rejects_sizes_below_detector_reach() -> None:
    with pytest.raises(ValueError):
        SampleWindow(6, 2)


def test_window_starts_zero_filled() -> None:
    window = SampleWindow(7, 2)
    assert all(window[k, c] == 0 for k in range(7) for c in range(2))


def test_newest_row_is_index_zero_and_oldest_is_evicted() -> None:
    window = SampleWindow(7, 2)
    for n in range(1, 11):
        window.push([n, -n])
    assert [window[k, 0] for k in range(7)] == [10, 9, 8, 7, 6, 5, 4]
    assert window.column(1) == [-10, -9, -8, -7, -6, -5, -4]
    assert window.history(0) == [4, 5, 6, 7, 8, 9, 10]


def test_larger_windows_keep_more_history() -> None:
    window = SampleWindow(12, 1)
    for n in range(20):
        window.push([n])
    assert window[11, 0] == 8
    assert window.as_array().shape == (12, 1)
    assert window.as_array()[:, 0].tolist() == list(range(19, 7, -1))


def test_out_of_range_offset_raises() -> None:
    window = SampleWindow(7, 1)
    with pytest.raises(IndexError):
        window[7, 0]

