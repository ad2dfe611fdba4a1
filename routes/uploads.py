from core.imports import Blueprint, request, jsonify, jwt_required, current_app
from core.errors import APIError
from core.storage import upload_image, BUCKETS, MAX_FILES_PER_UPLOAD
from werkzeug.utils import secure_filename

uploads_bp = Blueprint('uploads', __name__)


@uploads_bp.route('/api/uploads/<string:bucket>', methods=['POST'])
@jwt_required()
def upload_files(bucket):
    """
    Upload product or donation images
    ---
    tags:
      - Uploads
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - name: bucket
        in: path
        type: string
        enum: [products, donations]
        required: true
      - name: files
        in: formData
        type: file
        required: true
    responses:
      200:
        description: Public URLs of the stored images
      400:
        description: No files, too many files or unknown bucket
      500:
        description: Every upload failed
    """
    if bucket not in BUCKETS:
        return jsonify({"message": f"Unknown bucket '{bucket}'"}), 400

    uploaded_files = request.files.getlist('files')

    if not uploaded_files or all(f.filename == '' for f in uploaded_files):
        return jsonify({"message": "No files selected for upload"}), 400

    if len(uploaded_files) > MAX_FILES_PER_UPLOAD:
        return jsonify({"message": f"Maximum of {MAX_FILES_PER_UPLOAD} files allowed per upload."}), 400

    uploaded_urls = []
    errors = []

    for file in uploaded_files:
        if file.filename == '':
            continue
        try:
            uploaded_urls.append(upload_image(file, bucket))
        except APIError as e:
            errors.append(f"{secure_filename(file.filename)}: {e.message}")
        except Exception as e:
            current_app.logger.exception("Upload of %s failed", file.filename)
            errors.append(f"Error uploading file {secure_filename(file.filename)}: {e}")

    if not uploaded_urls and errors:
        return jsonify({"message": "All file uploads failed.", "errors": errors}), 500

    response = {
        "message": f"Successfully uploaded {len(uploaded_urls)} of {len(uploaded_files)} files.",
        "urls": uploaded_urls
    }
    if errors:
        response["errors"] = errors

    return jsonify(response), 200
