from core.imports import cloudinary, current_app, secrets, string, datetime
from core.errors import APIError

BUCKETS = {"products", "donations"}
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
MAX_FILES_PER_UPLOAD = 10


def allowed_file(filename):
    """Checks if a filename has an allowed extension."""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def configure_storage(app):
    cloudinary.config(
        cloud_name=app.config.get("CLOUDINARY_CLOUD_NAME"),
        api_key=app.config.get("CLOUDINARY_API_KEY"),
        api_secret=app.config.get("CLOUDINARY_API_SECRET"),
        secure=True,
    )


def object_name(filename):
    """{randomId}-{timestamp}.{ext}"""
    alphabet = string.ascii_lowercase + string.digits
    random_id = ''.join(secrets.choice(alphabet) for _ in range(13))
    timestamp = int(datetime.now().timestamp() * 1000)
    ext = filename.rsplit('.', 1)[1].lower()
    return f"{random_id}-{timestamp}.{ext}"


def upload_image(file, bucket):
    """Upload one file into a bucket folder and return its public URL."""
    if bucket not in BUCKETS:
        raise APIError(f"Unknown bucket '{bucket}'", 400)
    if not file or not file.filename or not allowed_file(file.filename):
        raise APIError("File type not allowed", 400)

    name = object_name(file.filename)
    public_id = name.rsplit('.', 1)[0]
    result = cloudinary.uploader.upload(
        file,
        folder=bucket,
        public_id=public_id,
        overwrite=False,
        resource_type="image",
    )
    url = result.get("secure_url")
    if not url:
        raise APIError("Upload failed: storage returned no URL", 502)

    current_app.logger.info("Uploaded %s/%s", bucket, name)
    return url
