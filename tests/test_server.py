"""Tests for the Flask API."""


def test_analyze_javascript(client):
    response = client.post("/api/analyze", json={
        "code": "function add(a,b) { return a+b; }\nif (a>0) { console.log('positive'); }",
        "language": "javascript",
    })
    assert response.status_code == 200

    data = response.get_json()
    assert data["success"] is True
    assert data["saved"] is False
    analysis = data["analysis"]
    assert analysis["language"] == "JavaScript"
    assert [n["type"] for n in analysis["flowchart"]["nodes"]] == [
        "start", "function", "decision", "output", "end"
    ]


def test_analyze_requires_code_and_language(client):
    response = client.post("/api/analyze", json={"code": "x = 1"})
    assert response.status_code == 400
    assert response.get_json() == {"success": False, "msg": "Code and language are required"}

    response = client.post("/api/analyze", json={"language": "python"})
    assert response.status_code == 400


def test_empty_code_is_accepted(client):
    response = client.post("/api/analyze", json={"code": "", "language": "python"})
    assert response.status_code == 200
    nodes = response.get_json()["analysis"]["flowchart"]["nodes"]
    assert [n["type"] for n in nodes] == ["start", "end"]


def test_syntax_error_is_a_normal_response(client):
    response = client.post("/api/analyze", json={"code": "function( {", "language": "js"})
    assert response.status_code == 200
    assert response.get_json()["analysis"]["explanation"][0].startswith("Syntax Error:")


def test_analysis_is_saved_and_listed(client):
    response = client.post("/api/analyze", json={
        "code": "def foo():\n    x = 1\n    print(x)",
        "language": "py",
        "userId": "alice",
        "fileId": "foo.py",
    })
    assert response.get_json()["saved"] is True

    history = client.get("/api/history/alice").get_json()
    assert history["success"] is True
    assert len(history["analyses"]) == 1
    assert history["analyses"][0]["explanation"]["totalLines"] == 3

    charts = client.get("/api/visualizations/foo.py").get_json()
    assert len(charts["visualizations"]) == 1
    assert len(charts["visualizations"][0]["flowchart"]["nodes"]) == 5


def test_history_limit_parameter(client):
    for i in range(3):
        client.post("/api/analyze", json={
            "code": f"x = {i}", "language": "py", "userId": "bob", "fileId": f"f{i}",
        })
    history = client.get("/api/history/bob?limit=2").get_json()
    assert len(history["analyses"]) == 2


def test_languages(client):
    data = client.get("/api/languages").get_json()
    assert data["languages"]["Python"] == ["python", "py"]
    assert data["fallback"] == "Generic"
