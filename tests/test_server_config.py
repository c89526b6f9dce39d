import pytest

from webserv.location_config import LocationConfig
from webserv.server_config import ListenAddress, ServerConfig
from webserv.utils import ConfigError


def test_set_listen_adds_address():
    srv = ServerConfig()
    srv.set_listen(["127.0.0.1:8080"])
    assert srv.listen_addresses == [ListenAddress("127.0.0.1", 8080)]
    assert srv.port() == 8080
    assert srv.interface() == "127.0.0.1"


def test_set_listen_multiple_addresses():
    srv = ServerConfig()
    srv.set_listen(["127.0.0.1:8080"])
    srv.set_listen(["0.0.0.0:9090"])
    assert srv.port(1) == 9090
    assert srv.interface(1) == "0.0.0.0"
    assert srv.has_port(9090)
    assert not srv.has_port(80)


def test_set_listen_without_colon():
    with pytest.raises(ConfigError, match="invalid listen format"):
        ServerConfig().set_listen(["8080"])


@pytest.mark.parametrize("value", ["host:", "host:0", "host:65536", "host:80x", "host:abc"])
def test_set_listen_invalid_port(value):
    with pytest.raises(ConfigError, match="invalid port"):
        ServerConfig().set_listen([value])


def test_set_listen_bounds_accepted():
    srv = ServerConfig()
    srv.set_listen(["a:1"])
    srv.set_listen(["a:65535"])
    assert [a.port for a in srv.listen_addresses] == [1, 65535]


def test_set_listen_duplicate():
    srv = ServerConfig()
    srv.set_listen(["localhost:80"])
    with pytest.raises(ConfigError, match="duplicate listen address: localhost:80"):
        srv.set_listen(["localhost:80"])


def test_set_listen_value_count():
    with pytest.raises(ConfigError, match="exactly one value"):
        ServerConfig().set_listen(["a:1", "b:2"])


def test_out_of_range_accessors():
    srv = ServerConfig()
    assert srv.port(5) == -1
    assert srv.interface(5) == ""
    assert srv.server_name() == ""


def test_set_server_name():
    srv = ServerConfig()
    srv.set_server_name(["example.com", "www.example.com"])
    assert srv.server_name() == "example.com"
    assert srv.server_name(1) == "www.example.com"
    assert srv.has_server_name("www.example.com")
    assert not srv.has_server_name("other.example.com")
    with pytest.raises(ConfigError, match="duplicate server_name"):
        srv.set_server_name(["again.example.com"])


def test_set_root_strips_trailing_slash_and_rejects_duplicate():
    srv = ServerConfig()
    srv.set_root(["./www/"])
    assert srv.root == "./www"
    with pytest.raises(ConfigError, match="duplicate root"):
        srv.set_root(["/other"])


def test_set_indexes():
    srv = ServerConfig()
    with pytest.raises(ConfigError, match="at least one value"):
        srv.set_indexes([])
    srv.set_indexes(["index.html", "index.htm"])
    assert srv.indexes == ["index.html", "index.htm"]
    with pytest.raises(ConfigError, match="duplicate index"):
        srv.set_indexes(["x.html"])


def test_set_client_max_body():
    srv = ServerConfig()
    srv.set_client_max_body(["1M"])
    assert srv.client_max_body == "1M"
    with pytest.raises(ConfigError, match="duplicate client_max_body_size"):
        srv.set_client_max_body(["2M"])


def test_set_error_page_maps_all_codes():
    srv = ServerConfig()
    srv.set_error_page(["404", "500", "/err.html"])
    assert srv.error_pages == {404: "/err.html", 500: "/err.html"}
    assert srv.error_page(404) == "/err.html"
    assert srv.has_error_page(500)
    assert srv.error_page(403) == ""
    assert not srv.has_error_page(403)


@pytest.mark.parametrize(
    "values, message",
    [
        (["/err.html"], "at least error code"),
        (["abc", "/err.html"], "invalid error code: abc"),
        (["99", "/err.html"], "between 100 and 599: 99"),
        (["600", "/err.html"], "between 100 and 599: 600"),
    ],
)
def test_set_error_page_errors(values, message):
    with pytest.raises(ConfigError, match=message):
        ServerConfig().set_error_page(values)


def test_add_location_inherits_root_and_indexes():
    srv = ServerConfig()
    srv.set_root(["/srv/www"])
    srv.set_indexes(["index.html"])
    srv.add_location(LocationConfig(path="/"))
    loc = srv.locations[0]
    assert loc.root == "/srv/www"
    assert loc.indexes == ["index.html"]


def test_add_location_keeps_own_values():
    srv = ServerConfig()
    srv.set_root(["/srv/www"])
    srv.set_indexes(["index.html"])
    srv.add_location(LocationConfig(path="/img", root="/data", indexes=["a.html"]))
    assert srv.locations[0].root == "/data"
    assert srv.locations[0].indexes == ["a.html"]