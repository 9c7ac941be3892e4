"""
Storage for uploads that must never be served as static media.

Files live under settings.PRIVATE_MEDIA_ROOT and have no public URL;
they are streamed by views that check who is asking.
"""
import os

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from django.utils.deconstruct import deconstructible


@deconstructible
class PrivateMediaStorage(FileSystemStorage):
    # Read on every access so override_settings(PRIVATE_MEDIA_ROOT=...) applies
    @property
    def base_location(self):
        return self._value_or_setting(self._location, settings.PRIVATE_MEDIA_ROOT)

    @property
    def location(self):
        return os.path.abspath(self.base_location)

    @property
    def base_url(self):
        return None


private_storage = PrivateMediaStorage()
