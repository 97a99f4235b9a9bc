import platform
import os
import stat
import logging

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    try:
        import win32security
        import win32api
        import win32con
        import win32file
        WINDOWS_SECURITY_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not fully installed, cannot set Windows file permissions securely.")
        WINDOWS_SECURITY_AVAILABLE = False
else:
    WINDOWS_SECURITY_AVAILABLE = False


def set_secure_file_permissions(filepath: str) -> bool:
    """
    Restrict a file to owner-only read/write. Best effort: failures are
    logged and reported through the return value, never raised.
    """
    if platform.system() == "Windows":
        return _set_windows_file_permissions(filepath)
    try:
        os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)  # 600
    except OSError as e:
        logger.warning(f"Could not set file permissions on {filepath}: {e}")
        return False
    return True


def _set_windows_file_permissions(filepath: str) -> bool:
    """
    Sets restrictive permissions on a file for Windows, granting full control
    only to the current user/owner and removing access for others.
    """
    if not WINDOWS_SECURITY_AVAILABLE:
        logger.warning(f"Skipping Windows file permission setting for {filepath}: pywin32 not available.")
        return False

    try:
        current_user_name = win32api.GetUserName()
        current_user_sid, _, _ = win32security.LookupAccountName(None, current_user_name)

        dacl = win32security.ACL()
        dacl.AddAccessAllowedAce(
            win32security.ACL_REVISION,
            win32con.GENERIC_READ | win32con.GENERIC_WRITE,
            current_user_sid
        )

        file_handle = win32file.CreateFile(
            filepath,
            win32con.WRITE_DAC,
            win32file.FILE_SHARE_READ | win32file.FILE_SHARE_WRITE | win32file.FILE_SHARE_DELETE,
            None,
            win32con.OPEN_EXISTING,
            win32con.FILE_ATTRIBUTE_NORMAL,
            None
        )

        try:
            # Protected DACL drops inherited entries
            win32security.SetSecurityInfo(
                file_handle,
                win32security.SE_FILE_OBJECT,
                win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
                None,
                None,
                dacl,
                None
            )
            logger.debug(f"Set restrictive permissions for {filepath} on Windows.")
        finally:
            win32file.CloseHandle(file_handle)
    except Exception as e:
        logger.warning(f"Failed to set Windows file permissions for {filepath}: {e}")
        return False
    return True
