import pytest

from poolkit.leakcheck import DoubleFreeError, LeakTracker, main


def test_malloc_writes_record(tmp_path):
    tracker = LeakTracker(tmp_path)
    address = tracker.malloc(10)
    record_file = tmp_path / f"{address:#x}.mem"
    assert record_file.exists()
    text = record_file.read_text()
    assert f"addr:{address:#x}" in text
    assert text.rstrip("\n").endswith("size:10")


def test_record_names_caller(tmp_path):
    tracker = LeakTracker(tmp_path)
    address = tracker.malloc(4)
    assert "test_record_names_caller" in tracker.leaks()[address]


def test_free_removes_record(tmp_path):
    tracker = LeakTracker(tmp_path)
    kept = tracker.malloc(10)
    dropped = tracker.malloc(15)
    tracker.free(dropped)
    leaks = tracker.leaks()
    assert list(leaks) == [kept]
    assert not (tmp_path / f"{dropped:#x}.mem").exists()


def test_double_free_raises(tmp_path):
    tracker = LeakTracker(tmp_path)
    address = tracker.malloc(20)
    tracker.free(address)
    with pytest.raises(DoubleFreeError) as info:
        tracker.free(address)
    assert info.value.address == address


def test_free_unknown_address_raises(tmp_path):
    tracker = LeakTracker(tmp_path)
    with pytest.raises(DoubleFreeError):
        tracker.free(0x1234)


def test_addresses_are_distinct(tmp_path):
    tracker = LeakTracker(tmp_path)
    addresses = [tracker.malloc(n) for n in (10, 15, 20)]
    assert len(set(addresses)) == 3
    assert sorted(tracker.leaks()) == sorted(addresses)


def test_negative_size_rejected(tmp_path):
    tracker = LeakTracker(tmp_path)
    with pytest.raises(ValueError):
        tracker.malloc(-1)


def test_main_leaves_first_block(tmp_path, capsys):
    assert main(["--directory", str(tmp_path)]) == 0
    files = list(tmp_path.glob("*.mem"))
    assert len(files) == 1
    assert "size:10" in files[0].read_text()
    assert "size:10" in capsys.readouterr().out