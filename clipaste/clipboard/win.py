import logging
import os

from .common import ImagePayload, make_temp_path, remove_quietly
from .errors import ProbeError
from .probes import PlatformProbe, ProbeResult

DETECT_SCRIPT = '''
Add-Type -AssemblyName System.Windows.Forms
$clipboard = [System.Windows.Forms.Clipboard]::GetDataObject()
if ($null -eq $clipboard) {
    Write-Output "empty"
} elseif ($clipboard.GetDataPresent([System.Windows.Forms.DataFormats]::Bitmap)) {
    Write-Output "image"
} elseif ($clipboard.GetDataPresent([System.Windows.Forms.DataFormats]::Text)) {
    Write-Output "text"
} elseif ($clipboard.GetFormats().Length -eq 0) {
    Write-Output "empty"
} else {
    Write-Output "unknown"
}
'''

EXTRACT_SCRIPT = '''
param([string]$OutPath)
Add-Type -AssemblyName System.Windows.Forms
Add-Type -AssemblyName System.Drawing
$clipboard = [System.Windows.Forms.Clipboard]::GetDataObject()
if ($null -ne $clipboard -and $clipboard.GetDataPresent([System.Windows.Forms.DataFormats]::Bitmap)) {
    $bitmap = $clipboard.GetData([System.Windows.Forms.DataFormats]::Bitmap)
    $bitmap.Save($OutPath, [System.Drawing.Imaging.ImageFormat]::Png)
    Write-Output "success"
} else {
    Write-Output "no-image"
}
'''

WRITE_SCRIPT = '''
param([string]$ImagePath)
Add-Type -AssemblyName System.Windows.Forms
Add-Type -AssemblyName System.Drawing
$image = [System.Drawing.Image]::FromFile($ImagePath)
try {
    [System.Windows.Forms.Clipboard]::SetImage($image)
    Write-Output "success"
} finally {
    $image.Dispose()
}
'''

# Messages from backends that cannot read the current (non-text) clipboard
READ_ERROR_SIGNATURES = (
    'element not found',
    'elementtiä ei löydy',
    'élément introuvable',
    'element nicht gefunden',
    'elemento no encontrado',
    'clipboard format is not available',
    'contains non-text data',
)


class WindowsProbe(PlatformProbe):
    name = 'windows'
    READ_ERROR_SIGNATURES = READ_ERROR_SIGNATURES
    # pyperclip reads an image-only clipboard as ''
    checks_empty_reads = True

    async def _powershell(self, script, args, timeout):
        """Run script from a temp .ps1 file, passing args as script parameters."""
        script_path = make_temp_path('.ps1', self.temp_dir)
        try:
            with open(script_path, 'w', encoding='utf-8') as f:
                f.write(script)
            result = await self._run([
                'powershell.exe',
                '-NoProfile',
                '-NonInteractive',
                '-Sta',
                '-ExecutionPolicy', 'Bypass',
                '-File', script_path,
                *args,
            ], timeout)
            return result.stdout.strip()
        finally:
            remove_quietly(script_path)

    async def detect(self):
        try:
            output = await self._powershell(DETECT_SCRIPT, [], self.detect_timeout)
        except (ProbeError, OSError) as e:
            logging.warning(f"Windows clipboard detection failed: {e}")
            return None

        tokens = output.split()
        if not tokens:
            return None
        try:
            return ProbeResult(tokens[-1].lower())
        except ValueError:
            logging.warning(f"Unexpected Windows clipboard detection output: {output!r}")
            return None

    async def extract_image(self):
        image_path = None
        try:
            image_path = make_temp_path('.png', self.temp_dir)
            output = await self._powershell(EXTRACT_SCRIPT, [image_path], self.image_timeout)
            if 'success' not in output:
                return None
            with open(image_path, 'rb') as f:
                data = f.read()
            if not data:
                return None
            return ImagePayload(format='png', data=data)
        except (ProbeError, OSError) as e:
            logging.warning(f"Windows clipboard image extraction failed: {e}")
            return None
        finally:
            remove_quietly(image_path)

    async def write_image(self, path):
        try:
            output = await self._powershell(WRITE_SCRIPT, [os.path.abspath(path)], self.image_timeout)
        except (ProbeError, OSError) as e:
            logging.warning(f"Windows clipboard image write failed: {e}")
            return False
        return 'success' in output
