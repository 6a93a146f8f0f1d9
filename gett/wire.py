"""
Wire-format records for Gett API payloads.

One model per payload shape, named after the JSON the service sends.
Unknown keys are ignored so new server fields do not break parsing.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class WireRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class StorageRecord(WireRecord):
    used: Optional[int] = None
    limit: Optional[int] = None


class UserRecord(WireRecord):
    userid: str
    fullname: Optional[str] = None
    email: Optional[str] = None
    storage: Optional[StorageRecord] = None


class LoginRecord(WireRecord):
    accesstoken: str
    expires: Any = None
    refreshtoken: Optional[str] = None
    user: Any = None


class UploadRecord(WireRecord):
    puturl: Optional[str] = None
    posturl: Optional[str] = None


class FileRecord(WireRecord):
    filename: str
    fileid: str
    size: Optional[int] = None
    created: Optional[int] = None
    downloads: Optional[int] = None
    readystate: Optional[str] = None
    getturl: Optional[str] = None
    downloadurl: Optional[str] = None
    sharename: Optional[str] = None
    upload: Optional[UploadRecord] = None


class ShareRecord(WireRecord):
    sharename: str
    title: Optional[str] = None
    created: Optional[int] = None
    # entries are mapped one by one so null items can be skipped
    files: Optional[List[Any]] = None

