"""
Tests for batch processing: ordering, accounting and failure isolation.
"""
import pytest

from conftest import FakeCatalogGateway, make_product
from erp_integration.core.exceptions import EmptyBatchError
from erp_integration.models.catalog_models import ProductStatus, SourceItemStatus
from erp_integration.schemas.products import ErrorKind, OutcomeStatus, ValidationResult
from erp_integration.services.product_batch_processor import ProductBatchProcessor
from erp_integration.services.product_input_validator import ProductInputValidator


WIDGET = {
    "sku": "A1",
    "action": "new",
    "name": "Widget",
    "price": 9.99,
    "attribute_set_id": 4,
    "type_id": "simple",
    "status": 1,
    "visibility": 4,
    "sources": [{"source_code": "default", "quantity": 5}],
}


def test_empty_batch_is_an_error(fake_catalog):
    with pytest.raises(EmptyBatchError, match="No products found in file."):
        ProductBatchProcessor(fake_catalog).process([])


def test_create_widget_in_empty_catalog(fake_catalog):
    report = ProductBatchProcessor(fake_catalog).process([WIDGET])

    assert report.created == 1
    assert (report.updated, report.enabled, report.disabled) == (0, 0, 0)
    assert report.failures == []
    assert not report.nothing_processed

    [product] = fake_catalog.saved_products
    assert product.sku == "A1"
    [batch] = fake_catalog.saved_batches
    assert [(i.sku, i.source_code, i.quantity, i.status) for i in batch] == [
        ("A1", "default", 5.0, SourceItemStatus.IN_STOCK)
    ]


def test_enable_twice_on_disabled_product():
    catalog = FakeCatalogGateway([make_product("B2", status=ProductStatus.DISABLED)])
    report = ProductBatchProcessor(catalog).process([
        {"sku": "B2", "action": "enable"},
        {"sku": "B2", "action": "enable"},
    ])

    assert report.enabled == 1
    assert (report.created, report.updated, report.disabled) == (0, 0, 0)
    assert report.failures == ['Product with SKU "B2" could not be enabled: already enabled.']
    assert [o.status for o in report.outcomes] == [OutcomeStatus.ENABLED, OutcomeStatus.FAILED]


def test_records_without_sku_are_skipped_with_their_position(fake_catalog):
    report = ProductBatchProcessor(fake_catalog).process([
        {"action": "new", "name": "No sku"},
        WIDGET,
        {"sku": "", "action": "enable"},
        "not a record",
    ])

    assert report.failures == [
        "Record #1: Product data missing SKU, cannot process.",
        "Record #3: Product data missing SKU, cannot process.",
        "Record #4: Product data missing SKU, cannot process.",
    ]
    assert report.created == 1
    assert report.outcomes[0].status == OutcomeStatus.SKIPPED
    # validation and the catalog are bypassed
    assert fake_catalog.lookups == ["A1"]


def test_validation_reasons_are_joined_into_one_failure(fake_catalog):
    report = ProductBatchProcessor(fake_catalog).process([
        {"sku": "C3", "action": "new", "price": -2},
    ])

    [failure] = report.failures
    assert failure.startswith('Product with SKU "C3" could not be created: name is missing.; ')
    assert failure.endswith("price cannot be negative (-2.00)")
    assert report.outcomes[0].error_kind == ErrorKind.VALIDATION
    assert fake_catalog.lookups == []


def test_unexpected_error_does_not_stop_the_batch():
    catalog = FakeCatalogGateway([
        make_product("K1", status=ProductStatus.ENABLED),
        make_product("K2", price=5.0),
        make_product("K3", status=ProductStatus.DISABLED),
    ])
    catalog.failing_skus["K2"] = RuntimeError("deadlock detected")
    records = [
        {"sku": "K1", "action": "disable"},
        {"sku": "K2", "action": "update", "price": 6, "sources": []},
        {"sku": "K3", "action": "enable"},
        dict(WIDGET, sku="K4"),
    ]

    report = ProductBatchProcessor(catalog).process(records)

    assert report.failures == ["Failed to process SKU: K2 - deadlock detected"]
    assert (report.disabled, report.enabled, report.created, report.updated) == (1, 1, 1, 0)
    assert report.total == len(records)
    assert [o.sku for o in report.outcomes] == ["K1", "K2", "K3", "K4"]
    assert report.outcomes[1].error_kind == ErrorKind.UNEXPECTED


def test_wrongly_typed_record_is_a_validation_failure(fake_catalog):
    report = ProductBatchProcessor(fake_catalog).process([
        dict(WIDGET, sku="P1", status="enabled"),
        dict(WIDGET, sku="P2"),
    ])

    assert report.failures == [
        'Product with SKU "P1" could not be created: status must be an integer (enabled)'
    ]
    assert report.outcomes[0].error_kind == ErrorKind.VALIDATION
    assert report.created == 1


class PermissiveValidator(ProductInputValidator):
    def validate(self, data):
        return ValidationResult()


def test_record_that_cannot_be_parsed_is_reported_on_one_line(fake_catalog):
    processor = ProductBatchProcessor(fake_catalog, validator=PermissiveValidator())
    report = processor.process([
        dict(WIDGET, sku="P1", sources=[{"source_code": "eu", "quantity": "lots"}]),
        dict(WIDGET, sku="P2"),
    ])

    [failure] = report.failures
    assert failure.startswith('Product with SKU "P1" could not be processed: sources.0.quantity: ')
    assert "\n" not in failure
    assert report.outcomes[0].error_kind == ErrorKind.VALIDATION
    assert report.created == 1
    assert fake_catalog.lookups == ["P2"]


def test_update_with_nan_price_is_rejected():
    catalog = FakeCatalogGateway([make_product("N1", price=1.0)])
    report = ProductBatchProcessor(catalog).process([
        {"sku": "N1", "action": "update", "price": float("nan"), "sources": []},
    ])

    assert report.updated == 0
    assert report.failures == [
        'Product with SKU "N1" could not be updated: price must be a number (nan)'
    ]
    assert catalog.products["N1"].price == 1.0


def test_sources_given_as_an_object_are_stocked(fake_catalog):
    report = ProductBatchProcessor(fake_catalog).process([
        dict(WIDGET, sources={"eu": {"source_code": "eu", "quantity": 2}, "us": {"source_code": "us", "quantity": 0}}),
    ])

    assert report.created == 1
    [batch] = fake_catalog.saved_batches
    assert [(i.source_code, i.quantity) for i in batch] == [("eu", 2.0), ("us", 0.0)]


def test_update_with_empty_sources_and_new_price_counts_as_updated():
    catalog = FakeCatalogGateway([make_product("U1", price=1.0)])
    report = ProductBatchProcessor(catalog).process([
        {"sku": "U1", "action": "update", "price": 2.0, "sources": []},
    ])

    assert report.updated == 1
    assert report.failures == []


def test_update_with_identical_quantities_is_not_a_noop():
    catalog = FakeCatalogGateway([make_product("U1", price=1.0)])
    update = {"sku": "U1", "action": "update", "sources": [{"source_code": "default", "quantity": 3}]}

    report = ProductBatchProcessor(catalog).process([update, update])

    assert report.updated == 2
    assert report.failures == []


def test_nothing_processed_when_every_record_fails(fake_catalog):
    report = ProductBatchProcessor(fake_catalog).process([
        {"sku": "X1", "action": "disable"},
        {"action": "new"},
    ])

    assert report.nothing_processed
    assert len(report.failures) == 2
    assert report.summary() == "Total updated: 0 | created: 0 | disabled: 0 | enabled: 0"


def test_same_sku_is_applied_in_input_order():
    product = make_product("S1", status=ProductStatus.ENABLED)
    catalog = FakeCatalogGateway([product])
    report = ProductBatchProcessor(catalog).process([
        {"sku": "S1", "action": "disable"},
        {"sku": "S1", "action": "enable"},
        {"sku": "S1", "action": "DISABLE"},
    ])

    assert (report.disabled, report.enabled) == (2, 1)
    assert product.status == ProductStatus.DISABLED


def test_end_to_end_against_the_database(catalog):
    processor = ProductBatchProcessor(catalog)
    report = processor.process([
        WIDGET,
        {"sku": "A1", "action": "update", "price": 11, "sources": [
            {"source_code": "default", "quantity": 0},
            {"source_code": "eu", "quantity": 4},
        ]},
        {"sku": "A1", "action": "disable"},
        dict(WIDGET),
    ])

    assert (report.created, report.updated, report.disabled) == (1, 1, 1)
    assert report.failures == ['Product with SKU "A1" could not be created: already exists.']

    product = catalog.get("A1")
    assert product.price == 11.0
    assert product.status == ProductStatus.DISABLED
    assert [(i.source_code, i.quantity, i.status) for i in catalog.get_source_items("A1")] == [
        ("default", 0.0, SourceItemStatus.OUT_OF_STOCK),
        ("eu", 4.0, SourceItemStatus.IN_STOCK),
    ]
