from fastapi import APIRouter, Query
from fastapi.responses import FileResponse

from motorent.utils.exceptions import NotFoundException
from motorent.utils.security import verify_storage_token
from motorent.utils.storage import PUBLIC_BUCKETS, storage

router = APIRouter(prefix="/storage/v1/object")


@router.get("/public/{bucket}/{path:path}", summary="Serve a file from a public bucket")
def public_object(bucket: str, path: str):
    if bucket not in PUBLIC_BUCKETS:
        raise NotFoundException("Bucket")
    return FileResponse(storage.open_path(bucket, path))


@router.get("/sign/{bucket}/{path:path}", summary="Serve a file through a signed URL")
def signed_object(bucket: str, path: str, token: str = Query(...)):
    verify_storage_token(token, bucket, path)
    return FileResponse(storage.open_path(bucket, path))
