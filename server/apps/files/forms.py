"""Input validation for the files API."""

from typing import Final

from django import forms

_NAME_MAX_LENGTH: Final = 255


class FolderForm(forms.Form):
    """Payload of folder creation."""

    name = forms.CharField(max_length=_NAME_MAX_LENGTH)
    parent_id = forms.IntegerField(required=False, min_value=1)


class UploadForm(forms.Form):
    """Multipart payload of file upload.

    An empty ``folder_id`` uploads into the root directory.
    """

    file = forms.FileField(allow_empty_file=True)
    folder_id = forms.IntegerField(required=False, min_value=1)
