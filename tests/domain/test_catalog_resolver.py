import pytest

from clingo.domain.orders.catalog import CatalogSnapshotResolver, find_option
from clingo.domain.orders.errors import InvalidSelectionError, NotFoundError
from clingo.models import ServiceOption


class TestFindOption:
    def setup_method(self):
        self.options = [ServiceOption(id=3, name="A", price=1.0), ServiceOption(id=7, name="B", price=2.0)]

    def test_exact_identity_match(self):
        assert find_option(self.options, 7).name == "B"

    def test_canonical_string_match(self):
        assert find_option(self.options, " 3 ").name == "A"

    def test_no_match(self):
        assert find_option(self.options, "9") is None
        assert find_option(self.options, None) is None
        assert find_option(self.options, True) is None


class TestResolve:
    def test_line_items_copy_option_by_value(self, db, service):
        kitchen, bathroom, _ = service.options
        resolver = CatalogSnapshotResolver(db)

        items = resolver.resolve(
            service.id,
            [{"optionId": kitchen.id, "quantity": 1}, {"optionId": str(bathroom.id), "quantity": 2}],
        )

        assert items == [
            {"optionId": kitchen.id, "name": "Kitchen", "unitPrice": 25.0, "quantity": 1},
            {"optionId": bathroom.id, "name": "Bathroom", "unitPrice": 40.0, "quantity": 2},
        ]

    def test_quantity_defaults_to_one(self, db, service):
        items = CatalogSnapshotResolver(db).resolve(service.id, [{"optionId": service.options[2].id}])

        assert items[0]["quantity"] == 1

    def test_service_id_as_string(self, db, service):
        items = CatalogSnapshotResolver(db).resolve(
            str(service.id), [{"optionId": service.options[0].id}]
        )

        assert len(items) == 1

    @pytest.mark.parametrize(
        "service_id", [999, "abc", None, 0, -1, "99999999999999999999", 99999999999999999999]
    )
    def test_unknown_service(self, db, service, service_id):
        with pytest.raises(NotFoundError):
            CatalogSnapshotResolver(db).resolve(service_id, [{"optionId": 1}])

    def test_empty_selection(self, db, service):
        with pytest.raises(InvalidSelectionError):
            CatalogSnapshotResolver(db).resolve(service.id, [])

    def test_unknown_option_is_named(self, db, service):
        with pytest.raises(InvalidSelectionError) as exc_info:
            CatalogSnapshotResolver(db).resolve(
                service.id, [{"optionId": service.options[0].id}, {"optionId": "opt-404"}]
            )

        assert exc_info.value.context["optionId"] == "opt-404"
        assert "opt-404" in exc_info.value.message

    def test_fractional_quantity_is_rejected(self, db, service):
        with pytest.raises(InvalidSelectionError):
            CatalogSnapshotResolver(db).resolve(
                service.id, [{"optionId": service.options[0].id, "quantity": 1.5}]
            )
