import pytest

from wegli.api.endpoints import Endpoint, build_url


def test_endpoint_paths_without_parameters():
    assert Endpoint.CHARGES.path() == "charges"
    assert Endpoint.PUBLIC_EXPORTS.path() == "exports/public"
    assert Endpoint.USER_EXPORTS.parameters == ()


def test_endpoint_fills_and_quotes_parameters():
    assert Endpoint.DISTRICT.path(zip="20095") == "districts/20095"
    assert Endpoint.NOTICE.path(token="a b/c") == "notices/a%20b%2Fc"
    assert Endpoint.CHARGE.parameters == ("tbnr",)


def test_endpoint_rejects_missing_unexpected_or_empty_parameters():
    with pytest.raises(ValueError):
        Endpoint.DISTRICT.path()
    with pytest.raises(ValueError):
        Endpoint.CHARGES.path(tbnr="1")
    with pytest.raises(ValueError):
        Endpoint.CHARGE.path(tbnr="")


def test_endpoint_templates_are_unique():
    templates = [endpoint.template for endpoint in Endpoint]
    assert len(templates) == len(set(templates))


def test_build_url_joins_with_single_slash():
    assert build_url("https://www.weg.li/api/", "charges") == "https://www.weg.li/api/charges"
    assert build_url("https://www.weg.li/api", "/charges") == "https://www.weg.li/api/charges"
