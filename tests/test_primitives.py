import pytest
from pydantic import ValidationError

from rulery import Count, CountDepleted, Pos, Rect


def test_pos_orders_by_row_then_col() -> None:
    positions = [Pos(1, 0), Pos(0, 2), Pos(0, 1)]
    assert sorted(positions) == [Pos(0, 1), Pos(0, 2), Pos(1, 0)]
    assert str(Pos(4, 0)) == "(4, 0)"
    assert Pos.from_tuple((2, 3)).as_tuple() == (2, 3)
    assert len({Pos(1, 1), Pos(1, 1)}) == 1


def test_rect_normalizes_corners_and_is_inclusive() -> None:
    rect = Rect.from_corners(Pos(3, 0), Pos(1, 2))
    assert (rect.row_min, rect.col_min, rect.row_max, rect.col_max) == (1, 0, 3, 2)
    assert rect.contains(Pos(1, 0))
    assert rect.contains(Pos(3, 2))
    assert not rect.contains(Pos(0, 0))
    assert not rect.contains(Pos(2, 3))


def test_rect_positions_are_row_major() -> None:
    rect = Rect.from_corners(Pos(0, 0), Pos(1, 1))
    assert list(rect.positions()) == [Pos(0, 0), Pos(0, 1), Pos(1, 0), Pos(1, 1)]


@pytest.mark.parametrize("n", [1, 2, 5])
def test_finite_count_decreases_exactly_n_times(n: int) -> None:
    count = Count.finite(n)
    for _ in range(n):
        count.decrease()
    assert count.is_depleted()
    with pytest.raises(CountDepleted):
        count.decrease()
    assert count.remaining == 0


def test_infinite_count_never_depletes() -> None:
    count = Count.infinite()
    for _ in range(1000):
        count.decrease()
    assert count.is_infinite
    assert not count.is_depleted()


def test_count_document_form() -> None:
    assert Count.model_validate(3) == Count.finite(3)
    assert Count.model_validate("infinite") == Count.infinite()
    assert Count.finite(3).model_dump() == 3
    assert Count.infinite().model_dump() == "infinite"
    assert str(Count.infinite()) == "Unlimited"
    assert str(Count.finite(7)) == "7"


@pytest.mark.parametrize("value", [-1, True, "lots", 1.5])
def test_count_rejects_invalid_values(value: object) -> None:
    with pytest.raises(ValidationError):
        Count.model_validate(value)
