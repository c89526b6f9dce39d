import pytest

from webserv.config_check import describe_config, main
from webserv.config_parser import ConfigParser
from webserv.utils import ConfigError

CONFIG = """
http {
    client_max_body_size 2M;
    server {
        listen localhost:8080;
        server_name site.example.com;
        root /srv/site;
        index index.html;
        client_max_body_size 1M;
        error_page 404 /404.html;
        location / {
            autoindex on;
            methods get delete;
        }
    }
}
"""

EXPECTED = (
    "----------------------------------------\n"
    "HTTP\n"
    "  client_max_body_size : 2M\n"
    "----------------------------------------\n"
    "Server\n"
    "  listen       : 8080\n"
    "  server_name  : site.example.com\n"
    "  root         : /srv/site\n"
    "  client_max   : 1M (server)\n"
    "  Location: /\n"
    "    root       : /srv/site\n"
    "    autoindex  : on\n"
    "    method     : GET\n"
    "    method     : DELETE\n"
    "    client_max : 1M (location)\n"
    "----------------------------------------\n"
    "✅ CONFIG OK\n"
)


def test_describe_config_report():
    parser = ConfigParser.from_text(CONFIG)
    parser.parse()
    assert describe_config(parser) == EXPECTED


def test_describe_config_defaults_methods_to_get():
    parser = ConfigParser.from_text(CONFIG.replace("methods get delete;", ""))
    parser.parse()
    report = describe_config(parser)
    assert "    method     : GET\n" in report
    assert "DELETE" not in report


def test_describe_config_without_servers():
    with pytest.raises(ConfigError, match="No server block found"):
        describe_config(ConfigParser([]))


def test_main_prints_report(tmp_path, capsys):
    path = tmp_path / "webserv.conf"
    path.write_text(CONFIG)
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == EXPECTED


def test_main_requires_one_argument(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_rejects_invalid_config(tmp_path, capsys):
    path = tmp_path / "webserv.conf"
    path.write_text(CONFIG.replace("root /srv/site;", ""))
    assert main([str(path)]) == 1
    assert "server missing root directive" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.conf")]) == 1
    assert "Failed to read configuration file" in capsys.readouterr().err