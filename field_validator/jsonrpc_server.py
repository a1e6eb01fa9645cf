#!/usr/bin/env python3
"""
JSON-RPC 2.0 Server for field-validator

Lets a program in any language validate records by spawning this process and
exchanging newline-delimited JSON-RPC 2.0 messages over stdin/stdout.

Usage:
    python -m field_validator.jsonrpc_server [--debug] [--config PATH]

Methods:
    validate           {"data": {...}, "rules": {...} | "ruleset": "name", "messages": {...}}
    discover_rules     names of the built-in rules
    discover_rulesets  {name: {"description", "fields"}} from the configured rulesets

Example:
    → {"jsonrpc":"2.0","id":1,"method":"validate","params":{"data":{"name":""},"rules":{"name":"required"}}}
    ← {"jsonrpc":"2.0","id":1,"result":{"valid":false,"errors":{"name":["The name field is required."]},...}}
"""

import sys
import json
import signal
import argparse
from typing import Any, Dict, Optional, Tuple

from field_validator import ConfigLoader, ConfigurationError, Validator
from field_validator.rule_registry import default_registry


class RequestError(Exception):
    """A request that cannot be dispatched; carries its JSON-RPC error code."""

    def __init__(self, code: int, message: str, request_id: Any = None):
        super().__init__(message)
        self.code = code
        self.request_id = request_id


class ValidationJsonRpcServer:
    """Serves Validator passes and rule discovery over JSON-RPC 2.0."""

    ERROR_PARSE = -32700
    ERROR_INVALID_REQUEST = -32600
    ERROR_METHOD_NOT_FOUND = -32601
    ERROR_INVALID_PARAMS = -32602
    ERROR_INTERNAL = -32000
    ERROR_CONFIGURATION = -32001

    def __init__(self, debug: bool = False, config_path: Optional[str] = None):
        """
        Args:
            debug: Trace requests and responses on stderr
            config_path: Validator config file; defaults to the bundled one
        """
        self.config = ConfigLoader(config_path)
        self.running = False
        self.debug = debug
        self.methods = {
            'validate': self._validate,
            'discover_rules': self._discover_rules,
            'discover_rulesets': self._discover_rulesets,
        }

    def _log(self, message: str):
        # stdout carries responses only
        if self.debug:
            sys.stderr.write(f"[DEBUG] {message}\n")
            sys.stderr.flush()

    def start_server(self):
        """Answer one request per stdin line until EOF or stop_server()."""
        self.running = True
        self._log("field-validator JSON-RPC server started")

        while self.running:
            try:
                line = sys.stdin.readline()
            except KeyboardInterrupt:
                break
            if not line:
                break
            if line.strip():
                self._send(self.handle_request(line))

        self._log("Server stopped")

    def stop_server(self):
        self.running = False

    def handle_request(self, request_json: str) -> Dict[str, Any]:
        """
        Answer a single JSON-RPC request.

        Args:
            request_json: One request as a JSON string

        Returns:
            The response object: ``result`` on success, ``error`` otherwise.
            Configuration errors (unknown rule, bad parameters, unknown
            ruleset) get their own code so clients can tell them from bad params.
        """
        request_id = None
        try:
            request_id, method, params = self._parse_request(request_json)
            self._log(f"{method} (id={request_id})")
            return self._response(request_id, result=self.methods[method](params))
        except RequestError as e:
            return self._response(e.request_id, error=(e.code, str(e)))
        except ConfigurationError as e:
            return self._response(request_id, error=(self.ERROR_CONFIGURATION, str(e)))
        except ValueError as e:
            return self._response(request_id, error=(self.ERROR_INVALID_PARAMS, str(e)))
        except Exception as e:
            self._log(f"Unexpected error: {e!r}")
            return self._response(request_id, error=(self.ERROR_INTERNAL, f"Internal error: {e}"))

    def _parse_request(self, request_json: str) -> Tuple[Any, str, Dict[str, Any]]:
        try:
            request = json.loads(request_json)
        except json.JSONDecodeError as e:
            raise RequestError(self.ERROR_PARSE, f"Parse error: {e}") from e

        if not isinstance(request, dict):
            raise RequestError(self.ERROR_INVALID_REQUEST, "Request must be a JSON object")
        if request.get("jsonrpc") != "2.0":
            raise RequestError(self.ERROR_INVALID_REQUEST,
                               f"Invalid JSON-RPC version: {request.get('jsonrpc')}")

        request_id = request.get("id")
        method = request.get("method")
        params = request.get("params", {})

        if not method:
            raise RequestError(self.ERROR_INVALID_REQUEST, "Missing 'method' field", request_id)
        if method not in self.methods:
            raise RequestError(self.ERROR_METHOD_NOT_FOUND, f"Method not found: {method}", request_id)
        if not isinstance(params, dict):
            raise RequestError(self.ERROR_INVALID_PARAMS,
                               f"Params must be an object, got {type(params).__name__}", request_id)
        return request_id, method, params

    def _validate(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Run one pass; ruleset messages apply first, request messages override them."""
        data = params.get('data')
        rules = params.get('rules')
        ruleset = params.get('ruleset')
        messages = params.get('messages')

        if data is None:
            raise ValueError("Missing required parameter: data")
        if (rules is None) == (ruleset is None):
            raise ValueError("Give exactly one of the parameters rules or ruleset")
        if messages is not None and not isinstance(messages, dict):
            raise ValueError("Parameter messages must be an object")

        if ruleset is not None:
            named = self.config.get_ruleset(ruleset)
            rules = named["rules"]
            messages = {**named["messages"], **(messages or {})}

        validator = Validator(data, rules, messages, config=self.config).validate()
        return {
            "valid": not validator.has_errors(),
            "errors": validator.get_errors(),
            "errors_list": validator.get_errors_list(),
        }

    def _discover_rules(self, params: Dict[str, Any]):
        return default_registry().names()

    def _discover_rulesets(self, params: Dict[str, Any]):
        return {
            name: {
                "description": ruleset.get("description", ""),
                "fields": list(ruleset["rules"]),
            }
            for name, ruleset in self.config.get_rulesets().items()
        }

    def _response(self, request_id: Any, result: Any = None,
                  error: Optional[Tuple[int, str]] = None) -> Dict[str, Any]:
        response = {"jsonrpc": "2.0", "id": request_id}
        if error is None:
            response["result"] = result
        else:
            code, message = error
            response["error"] = {"code": code, "message": message}
        return response

    def _send(self, response: Dict[str, Any]):
        line = json.dumps(response)
        self._log(f"→ {line}")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()


def main():
    """Entry point of the field-validator-rpc console script."""
    parser = argparse.ArgumentParser(
        description="Validate records over JSON-RPC 2.0 on stdin/stdout",
    )
    parser.add_argument('--debug', action='store_true',
                        help='Trace requests and responses on stderr')
    parser.add_argument('--config', default=None,
                        help='Validator config YAML (grammar, rulesets_uri)')
    args = parser.parse_args()

    server = ValidationJsonRpcServer(debug=args.debug, config_path=args.config)

    def stop(signum, frame):
        server.stop_server()

    signal.signal(signal.SIGTERM, stop)
    signal.signal(signal.SIGINT, stop)

    server.start_server()


if __name__ == "__main__":
    main()
