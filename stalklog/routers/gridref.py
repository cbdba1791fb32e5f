from fastapi import APIRouter

from ..gridref.bounds import HEREFORDSHIRE
from ..gridref.convert import locate, try_parse
from ..gridref.encoder import format_reference
from ..gridref.errors import GridReferenceError
from ..schemas import GridRefInfo

router = APIRouter(prefix="/gridref", tags=["gridref"])


@router.get("/{text}", response_model=GridRefInfo)
def check_grid_reference(text: str):
    """Validate and convert a grid reference, e.g. 'SO 514 398'.

    Always succeeds; an invalid reference is reported in ``error`` and ``kind``.
    """
    ref = try_parse(text)
    if isinstance(ref, GridReferenceError):
        return GridRefInfo(input=text, valid=False, error=str(ref), kind=ref.kind)

    info = GridRefInfo(
        input=text,
        valid=True,
        canonical=format_reference(ref.easting, ref.northing, ref.precision),
        easting=ref.easting,
        northing=ref.northing,
        precision=ref.precision,
        precision_metres=ref.resolution,
    )
    point = locate(text)
    if isinstance(point, GridReferenceError):
        info.error = str(point)
        info.kind = point.kind
        return info

    info.latitude = point.lat
    info.longitude = point.lng
    info.in_herefordshire = HEREFORDSHIRE.contains(point)
    return info
