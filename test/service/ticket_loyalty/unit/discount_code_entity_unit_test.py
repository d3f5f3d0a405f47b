from datetime import datetime, timedelta, timezone
from decimal import Decimal
import uuid

import attrs
import pytest

from src.platform.exception.exceptions import DomainError
from src.service.ticket_loyalty.domain.entity.discount_code_entity import DiscountCode
from src.service.ticket_loyalty.domain.enum.discount_type import DiscountType


pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _create(**overrides) -> DiscountCode:
    kwargs = dict(
        code=' 10off ',
        discount_type=DiscountType.PERCENTAGE,
        value=Decimal('10'),
        valid_from=NOW - timedelta(days=1),
        valid_to=NOW + timedelta(days=1),
    )
    kwargs.update(overrides)
    return DiscountCode.create(**kwargs)


class TestDiscountCodeCreate:
    def test_code_is_normalized_to_upper_case(self):
        assert _create().code == '10OFF'

    def test_percentage_above_100_is_rejected(self):
        with pytest.raises(DomainError, match='cannot exceed 100'):
            _create(value=Decimal('101'))

    def test_non_positive_value_is_rejected(self):
        with pytest.raises(DomainError, match='must be positive'):
            _create(discount_type=DiscountType.FIXED, value=Decimal('0'))

    def test_window_must_end_after_it_starts(self):
        with pytest.raises(DomainError):
            _create(valid_from=NOW, valid_to=NOW)


class TestDiscountCodeEvaluate:
    def test_inactive_code_gives_nothing(self):
        code = attrs.evolve(_create(), is_active=False)

        assert code.evaluate(amount=Decimal('200'), event_id=uuid.uuid4(), now=NOW) == 0

    def test_not_yet_valid_code_gives_nothing(self):
        code = _create(valid_from=NOW + timedelta(hours=1), valid_to=NOW + timedelta(days=1))

        assert code.evaluate(amount=Decimal('200'), event_id=uuid.uuid4(), now=NOW) == 0

    def test_event_scoped_code_applies_to_its_event(self):
        event_id = uuid.uuid4()
        code = _create(event_id=event_id)

        assert code.evaluate(amount=Decimal('200'), event_id=event_id, now=NOW) == Decimal('20.00')

    def test_zero_amount_gives_nothing(self):
        assert _create().evaluate(amount=Decimal('0'), event_id=uuid.uuid4(), now=NOW) == 0
