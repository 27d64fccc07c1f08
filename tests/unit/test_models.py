import pytest

from address_pins.common.models import Coordinate, FormFields, Marker, Region, UserRecord, safe_float, valid_lat_lon


def _payload(**overrides):
    payload = {
        "nome": "Ana",
        "rua": "Rua Teste",
        "numero": "10",
        "cidade": "São Paulo",
        "estado": "SP",
        "latitude": -23.5,
        "longitude": -46.6,
    }
    payload.update(overrides)
    return payload


def test_user_record_dict_uses_persisted_field_names():
    record = UserRecord.from_dict(_payload())

    assert record.city == "São Paulo"
    assert record.to_dict() == _payload()


def test_user_record_from_dict_accepts_numeric_strings():
    record = UserRecord.from_dict(_payload(numero=10, latitude="-23.5", longitude="-46.6"))

    assert record.number == "10"
    assert record.latitude == -23.5


@pytest.mark.parametrize(
    "payload",
    [
        {"nome": "Ana"},
        _payload(latitude=None),
        _payload(longitude="west"),
        _payload(latitude=120.0),
        ["not", "an", "object"],
    ],
)
def test_user_record_from_dict_rejects_malformed(payload):
    with pytest.raises(ValueError):
        UserRecord.from_dict(payload)


def test_user_record_from_form_keeps_original_text():
    form = FormFields(name="Ana", street="Rua Teste", number="10", city="São Paulo", state="SP")

    record = UserRecord.from_form(form, Coordinate(-23.5, -46.6))

    assert record.to_dict() == _payload()


def test_form_missing_required_treats_blank_as_missing():
    form = FormFields(name="Ana", street="  ", city="Recife", state="")

    assert form.missing_required(("street", "city", "state")) == ["street", "state"]


def test_marker_and_region_helpers():
    record = UserRecord.from_dict(_payload())

    assert Marker.for_record(record) == Marker(-23.5, -46.6, "Ana", "Rua Teste, 10")
    assert Marker.for_device(Coordinate(1.0, 2.0)).title == "Você está aqui"
    assert Region.around(1.0, 2.0, 0.01) == Region(1.0, 2.0, 0.01, 0.01)


def test_safe_float_and_lat_lon_bounds():
    assert safe_float("1.5") == 1.5
    assert safe_float(True) is None
    assert safe_float("x") is None
    assert valid_lat_lon(90, -180)
    assert not valid_lat_lon(-90.1, 0)
    assert not valid_lat_lon(None, 0)
