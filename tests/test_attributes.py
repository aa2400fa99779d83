import pytest

from apps.vendors.services.attributes import VendorAttributes, coerce_bool


@pytest.mark.parametrize("value", [True, "true", "Yes", "yes"])
def test_truthy_spellings(value):
    assert coerce_bool(value) is True


@pytest.mark.parametrize("value", [False, "false", "No", "no"])
def test_falsy_spellings(value):
    assert coerce_bool(value) is False


@pytest.mark.parametrize("value", [None, 1, 0, 100, "TRUE", "Y", "", [], {}])
def test_everything_else_is_unknown(value):
    assert coerce_bool(value) is None


def test_dotted_lookup():
    attrs = VendorAttributes({"city": "Pune", "details": {"cuisines": ["Andhra"], "deliverables": {"albums": 2}}})
    assert attrs.get("city") == "Pune"
    assert attrs.get("details.deliverables.albums") == 2
    assert attrs.get("details.missing") is None
    assert attrs.get("city.name") is None


def test_values_flatten_arrays_and_drop_nulls():
    attrs = VendorAttributes({"details": {"venueType": ["banquet", None], "decorPolicy": "inhouse"}})
    assert attrs.values("details.venueType") == ["banquet"]
    assert attrs.values("details.decorPolicy") == ["inhouse"]
    assert attrs.values("details.nothing") == []


def test_flag():
    attrs = VendorAttributes({"details": {"lift": "Yes", "capacity": 1500}})
    assert attrs.flag("details.lift") is True
    assert attrs.flag("details.valetParking") is None
    assert attrs.flag("details.capacity") is None
