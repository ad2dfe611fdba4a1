import io


def image(name="shirt.jpg"):
    return (io.BytesIO(b"fake image bytes"), name)


def test_upload_returns_urls(app, client, seller):
    headers, _ = seller
    response = client.post("/api/uploads/products", data={"files": [image(), image("back.png")]},
                           headers=headers, content_type="multipart/form-data")
    assert response.status_code == 200
    body = response.get_json()
    assert len(body["urls"]) == 2
    assert all(url.startswith("https://res.cloudinary.com/test/products/") for url in body["urls"])
    assert "errors" not in body
    assert {call["folder"] for call in app.uploads} == {"products"}
    assert all(call["overwrite"] is False for call in app.uploads)


def test_partial_failure_reports_errors(client, customer):
    headers, _ = customer
    response = client.post("/api/uploads/donations", data={"files": [image(), image("notes.txt")]},
                           headers=headers, content_type="multipart/form-data")
    assert response.status_code == 200
    body = response.get_json()
    assert len(body["urls"]) == 1
    assert len(body["errors"]) == 1


def test_all_failed(client, customer):
    headers, _ = customer
    response = client.post("/api/uploads/donations", data={"files": [image("a.exe")]},
                           headers=headers, content_type="multipart/form-data")
    assert response.status_code == 500


def test_unknown_bucket(client, customer):
    headers, _ = customer
    response = client.post("/api/uploads/avatars", data={"files": [image()]},
                           headers=headers, content_type="multipart/form-data")
    assert response.status_code == 400


def test_no_files(client, customer):
    headers, _ = customer
    response = client.post("/api/uploads/products", data={}, headers=headers, content_type="multipart/form-data")
    assert response.status_code == 400


def test_too_many_files(client, customer):
    headers, _ = customer
    files = [image(f"{i}.jpg") for i in range(11)]
    response = client.post("/api/uploads/products", data={"files": files},
                           headers=headers, content_type="multipart/form-data")
    assert response.status_code == 400


def test_object_names_are_unique():
    from core.storage import object_name

    names = {object_name("photo.JPG") for _ in range(50)}
    assert len(names) == 50
    assert all(name.endswith(".jpg") for name in names)
