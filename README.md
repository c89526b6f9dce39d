# webserv

A small HTTP/1.1 server that multiplexes its listening and client sockets with
`poll`, configured with nginx-style `http`, `server` and `location` blocks. It
runs on POSIX systems (it relies on `select.poll`).

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
webserv path/to/webserv.conf
```

If no path is given, `webserv.conf` in the current directory is used. The
command parses the configuration, opens a listening socket for every `listen`
address of every server, and serves until it receives SIGINT (Ctrl-C) or
SIGTERM. SIGPIPE is ignored while it runs. Clients are closed after 30 seconds
without activity, and after their response has been sent completely.

An interface of `localhost` is bound as `127.0.0.1`; an empty interface (for
example `listen :8080;`) binds to all interfaces.

## Checking a configuration

```
webserv-config path/to/webserv.conf
```

This parses the file and prints the http `client_max_body_size` and every
server (first port, first server name, root, body size) and location (root,
autoindex, allowed methods, body size), ending with `✅ CONFIG OK`. On an
invalid file it prints `ERROR: <message>` to standard error and exits with
status 1.

## Configuration

```
http {
    client_max_body_size 10M;

    server {
        listen 127.0.0.1:8080;
        server_name example.com;
        root /var/www;
        index index.html;
        client_max_body_size 1M;
        error_page 404 /errors/404.html;

        location / {
            methods GET POST;
            autoindex on;
        }

        location /old {
            return 301 /new;
        }

        location /cgi-bin {
            cgi_path /usr/bin/python3;
            cgi_extension .py;
            upload_path /tmp/uploads;
        }
    }
}
```

- At most one `http` block is allowed; it accepts only `client_max_body_size`
  and `server` blocks, and must contain at least one server. `server` blocks
  may also stand at the top level.
- Server directives: `listen interface:port` (port 1–65535, may repeat),
  `server_name`, `root`, `index`, `client_max_body_size`,
  `error_page code... path` (codes 100–599).
- Every server needs `listen`, `root`, `index`, `client_max_body_size`,
  `error_page` and at least one `location`.
- Location directives: `root`, `index`, `autoindex on|off`,
  `client_max_body_size`, `methods` (GET, POST, DELETE, PUT, PATCH, HEAD,
  OPTIONS), `return [301|302|303|307|308] /url` (code defaults to 301),
  `cgi_path` (absolute), `cgi_extension` (starting with `.`), `upload_path`
  (absolute).
- A location that leaves out `root`, `index` or `client_max_body_size` takes
  the server's value; a location with no `methods` allows only `GET`.
- Sizes accept a `K`, `M` or `G` suffix (case-insensitive).
- `#` starts a comment.

Errors are reported as `webserv.utils.ConfigError`.

## Using it as a library

```python
from webserv.config_parser import ConfigParser
from webserv.http_request import HttpRequest
from webserv.router import Router

parser = ConfigParser.from_file("webserv.conf")
servers = parser.parse()

request = HttpRequest()
request.parse("GET /index.html HTTP/1.1\r\nHost: localhost:8080\r\n\r\n")

router = Router(servers, request)
status = router.process_request()
print(status, router.matched_path, router.path_root_uri, router.remaining_path)
```

- `webserv.config_parser`: `ConfigParser` (`from_file`, `from_text`, `parse`)
  and `parse_config(path)`.
- `webserv.server_config` / `webserv.location_config`: `ServerConfig`,
  `ListenAddress` and `LocationConfig` dataclasses.
- `webserv.http_request`: `HttpRequest.parse` accepts `str` or `bytes` and
  raises `RequestError`, whose `code` is the status to answer with (400, 411,
  414, 501 or 505). Only HTTP/1.0 and HTTP/1.1 are accepted; HTTP/1.1 requires
  a `Host` header; a body needs a matching `Content-Length`.
- `webserv.http_response`: `HttpResponse` with `set_status`, `add_header`,
  `set_body` and `serialize`.
- `webserv.router`: `Router` picks the server by port and `Host` name (falling
  back to the first server on that port) and the location with the longest
  matching prefix, then yields 200, 301 (redirect), 404, 405, 413 or 500.
- `webserv.mime_types.mime_type_for(extension)`.
- `webserv.server_manager.ServerManager`, `webserv.server.Server`,
  `webserv.client.Client` and `webserv.poll_manager.PollManager` make up the
  event loop.

## What it does not do

The server routes each request but does not act on the result: every request
that parses is answered with a bare `HTTP/1.1 200 OK` and no body, and every
request that fails to parse with `400 Bad Request`. It does not serve files
from `root`, list directories, send redirects or configured error pages, run
CGI programs or store uploads. The `autoindex`, `return`, `error_page`,
`cgi_*` and `upload_path` settings are parsed and validated only. Connections
are not kept alive.