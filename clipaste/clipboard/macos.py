import logging
import os

from .common import ImagePayload, make_temp_path, remove_quietly
from .errors import ProbeError
from .probes import PlatformProbe, ProbeResult

# Tokens in `clipboard info` output that mean image data is present
IMAGE_INFO_TOKENS = ('picture', 'PNGf', 'JPEG', 'TIFF', 'GIF', 'BMP')

EXTRACT_SCRIPT = '''
on run argv
    set tempPath to POSIX file (item 1 of argv)
    set fileRef to missing value
    set imageData to missing value
    set formatLabel to ""
    set formatPairs to {{"png", «class PNGf»}, {"jpeg", «class JPEG»}, {"gif", «class GIFf»}, {"tiff", «class TIFF»}, {"bmp", «class BMPf»}}

    repeat with pairItem in formatPairs
        try
            set imageData to the clipboard as (item 2 of pairItem)
            set formatLabel to item 1 of pairItem
            exit repeat
        on error
            set imageData to missing value
        end try
    end repeat

    if imageData is missing value then
        return "no-image"
    end if

    try
        set fileRef to open for access tempPath with write permission
        set eof of fileRef to 0
        write imageData to fileRef
        close access fileRef
        return "success:" & formatLabel
    on error errMsg
        try
            if fileRef is not missing value then close access fileRef
        end try
        return "error:" & errMsg
    end try
end run
'''

WRITE_SCRIPT = '''
on run argv
    set imageFile to POSIX file (item 1 of argv)
    set formatLabel to item 2 of argv
    try
        if formatLabel is "png" then
            set the clipboard to (read imageFile as «class PNGf»)
        else if formatLabel is "jpeg" then
            set the clipboard to (read imageFile as «class JPEG»)
        else if formatLabel is "gif" then
            set the clipboard to (read imageFile as «class GIFf»)
        else if formatLabel is "tiff" then
            set the clipboard to (read imageFile as «class TIFF»)
        else
            set the clipboard to (read imageFile as picture)
        end if
        return "success"
    on error errMsg
        return "error:" & errMsg
    end try
end run
'''

EXTENSION_FORMATS = {
    '.png': 'png',
    '.jpg': 'jpeg',
    '.jpeg': 'jpeg',
    '.gif': 'gif',
    '.tif': 'tiff',
    '.tiff': 'tiff',
}


def parse_clipboard_info(output):
    info = output.strip()
    if not info:
        return ProbeResult.EMPTY
    if any(token in info for token in IMAGE_INFO_TOKENS):
        return ProbeResult.IMAGE
    return ProbeResult.TEXT


class MacOSProbe(PlatformProbe):
    name = 'mac'
    # pbpaste-style backends read an image-only clipboard as ''
    checks_empty_reads = True

    async def detect(self):
        try:
            result = await self._run(['osascript', '-e', 'clipboard info'], self.detect_timeout)
        except ProbeError as e:
            logging.warning(f"macOS clipboard detection failed: {e}")
            return None
        return parse_clipboard_info(result.stdout)

    async def extract_image(self):
        image_path = None
        try:
            image_path = make_temp_path('.img', self.temp_dir)
            result = await self._run(['osascript', '-e', EXTRACT_SCRIPT, image_path], self.image_timeout)
            output = result.stdout.strip()
            if not output.startswith('success:'):
                logging.debug(f"No image coercion succeeded: {output!r}")
                return None
            image_format = output.split(':', 1)[1].strip() or 'png'
            with open(image_path, 'rb') as f:
                data = f.read()
            if not data:
                return None
            return ImagePayload(format=image_format, data=data)
        except (ProbeError, OSError) as e:
            logging.warning(f"macOS clipboard image extraction failed: {e}")
            return None
        finally:
            remove_quietly(image_path)

    async def write_image(self, path):
        extension = os.path.splitext(path)[1].lower()
        image_format = EXTENSION_FORMATS.get(extension, 'picture')
        try:
            result = await self._run(
                ['osascript', '-e', WRITE_SCRIPT, os.path.abspath(path), image_format],
                self.image_timeout,
            )
        except ProbeError as e:
            logging.warning(f"macOS clipboard image write failed: {e}")
            return False
        output = result.stdout.strip()
        if output != 'success':
            logging.warning(f"macOS clipboard image write failed: {output}")
            return False
        return True
