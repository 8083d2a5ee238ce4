from dondesalimos.core.constants import TIPO_BAR, TIPO_BOLICHE
from dondesalimos.core.exceptions import ConexionError
from dondesalimos.services.google_places_service import (
    GooglePlacesService,
    debe_excluirse,
    determinar_tipo_comercio,
    normalizar_lugar,
)

URL_NEARBY = "/api/GooglePlaces/nearby"


def lugar(place_id, nombre="Bar", tipos=("bar",)):
    return {
        "place_id": place_id,
        "name": nombre,
        "vicinity": "Centro",
        "types": list(tipos),
        "geometry": {"location": {"lat": -31.4, "lng": -64.1}},
        "rating": 4.5,
        "opening_hours": {"open_now": True},
    }


def test_buscar_cercanos_combina_y_deduplica(api):
    resultados = {
        ("bar", None): [lugar("a"), lugar("b", "Hotel Plaza", ("bar", "lodging"))],
        ("night_club", None): [lugar("c", "Club X", ("night_club",)), lugar("a")],
        ("bar", "cerveceria"): [lugar("d")],
        ("bar", "pub"): [lugar("d"), {"name": "sin id"}],
    }

    def nearby(data, params):
        return {"status": "OK", "results": resultados[(params["type"], params.get("keyword"))]}

    api.responder("GET", URL_NEARBY, nearby)

    lugares = GooglePlacesService(api).buscar_cercanos(-31.4, -64.1)

    assert [l["place_id"] for l in lugares] == ["a", "c", "d"]
    assert len(api.llamadas_a("GET", URL_NEARBY)) == 4


def test_busqueda_fallida_devuelve_vacio(api):
    api.responder("GET", URL_NEARBY, ConexionError())
    assert GooglePlacesService(api).buscar_cercanos(-31.4, -64.1) == []


def test_status_distinto_de_ok(api):
    api.responder("GET", URL_NEARBY, {"status": "ZERO_RESULTS", "results": []})
    assert GooglePlacesService(api).buscar_cercanos_normalizados(-31.4, -64.1) == []


def test_obtener_detalle(api):
    api.responder("GET", "/api/GooglePlaces/details/a", {"status": "OK", "result": {"name": "Bar"}})
    api.responder("GET", "/api/GooglePlaces/details/b", ConexionError())

    servicio = GooglePlacesService(api)
    assert servicio.obtener_detalle("a") == {"name": "Bar"}
    assert servicio.obtener_detalle("b") is None


def test_exclusiones():
    assert debe_excluirse({"name": "Gimnasio Centro", "types": ["bar"]})
    assert debe_excluirse({"name": "Bar", "types": ["bar", "gas_station"]})
    assert not debe_excluirse({"name": "Cervecería", "types": ["bar"]})


def test_tipo_de_comercio():
    assert determinar_tipo_comercio({"name": "X", "types": ["night_club"]}) == TIPO_BOLICHE
    assert determinar_tipo_comercio({"name": "Disco Y", "types": ["bar"]}) == TIPO_BOLICHE
    assert determinar_tipo_comercio({"name": "Bar Z", "types": ["bar"]}) == TIPO_BAR


def test_normalizar_lugar():
    normalizado = normalizar_lugar(lugar("a", "Club Nocturno", ("night_club",)))
    assert normalizado.place_id == "a"
    assert normalizado.es_local is False
    assert normalizado.source == "google"
    assert normalizado.id_tipo_comercio == TIPO_BOLICHE
    assert normalizado.latitud == -31.4
    assert normalizado.is_open is True
