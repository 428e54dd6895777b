"""reqshape - Request-shape assertions for mocked HTTP clients.

Verifies that a client under test produced exactly the request a test expects, before a mocked transport
answers with a canned response:
- Fluent matchers attached to mock rules (no content, authentication, JSON body, multipart fields)
- Structural JSON matching (subset match over objects, arrays and literal values)
- Fail-fast predicate chains with structured failures (expected vs. actual)
- In-process mock transport with async and blocking client handles
- Pytest plugin with a `client_mocker` fixture
"""
