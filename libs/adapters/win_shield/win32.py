# libs/adapters/win_shield/win32.py
"""
Win32 shield window and DWM flush via ctypes.

The shield is a disabled, non-activating popup placed at the bottom of the
z-order. It only shows through where the windows above it are translucent,
and paints a solid colour on WM_ERASEBKGND. Calls are synchronous: after each
visual change the adapter dispatches pending messages itself, and DwmFlush
blocks until the compositor has presented the result.

Importable on every platform; constructing anything off Windows raises
RuntimeError.
"""
from __future__ import annotations

import ctypes
import logging
import sys
import threading
from typing import Any, Final

from ports.compositor import CompositorPort
from ports.surface import Color, ShieldFactoryPort, ShieldPort, SurfaceError
from ports.vision import Rect

LOG: Final = logging.getLogger("clearshot.win32")

IS_WINDOWS: Final = sys.platform == "win32"

CLASS_NAME: Final = "ClearshotShield"

# --- Win32 constants ---------------------------------------------------------

CS_NOCLOSE = 0x0200
WS_POPUP = 0x80000000
WS_DISABLED = 0x08000000
WS_EX_NOACTIVATE = 0x08000000
WS_EX_TOOLWINDOW = 0x00000080

HWND_BOTTOM = 1
SWP_NOSIZE = 0x0001
SWP_NOMOVE = 0x0002
SWP_NOACTIVATE = 0x0010
SWP_SHOWWINDOW = 0x0040

WM_ERASEBKGND = 0x0014
WM_NCHITTEST = 0x0084
HTTRANSPARENT = -1
PM_REMOVE = 0x0001


def colorref(color: Color) -> int:
    r, g, b = color
    return (r & 0xFF) | ((g & 0xFF) << 8) | ((b & 0xFF) << 16)


def _require_windows() -> None:
    if not IS_WINDOWS:
        raise RuntimeError("The Win32 shield is only available on Windows.")


# --- Win32 APIs --------------------------------------------------------------

if IS_WINDOWS:
    from ctypes import wintypes

    user32 = ctypes.WinDLL("user32", use_last_error=True)
    gdi32 = ctypes.WinDLL("gdi32", use_last_error=True)
    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
    dwmapi = ctypes.WinDLL("dwmapi")

    LRESULT = ctypes.c_ssize_t
    WNDPROC = ctypes.WINFUNCTYPE(
        LRESULT, wintypes.HWND, wintypes.UINT, wintypes.WPARAM, wintypes.LPARAM
    )

    class WNDCLASSEXW(ctypes.Structure):
        _fields_ = [
            ("cbSize", wintypes.UINT),
            ("style", wintypes.UINT),
            ("lpfnWndProc", WNDPROC),
            ("cbClsExtra", ctypes.c_int),
            ("cbWndExtra", ctypes.c_int),
            ("hInstance", wintypes.HANDLE),
            ("hIcon", wintypes.HANDLE),
            ("hCursor", wintypes.HANDLE),
            ("hbrBackground", wintypes.HANDLE),
            ("lpszMenuName", wintypes.LPCWSTR),
            ("lpszClassName", wintypes.LPCWSTR),
            ("hIconSm", wintypes.HANDLE),
        ]

    kernel32.GetModuleHandleW.argtypes = [wintypes.LPCWSTR]
    kernel32.GetModuleHandleW.restype = wintypes.HMODULE

    user32.RegisterClassExW.argtypes = [ctypes.POINTER(WNDCLASSEXW)]
    user32.RegisterClassExW.restype = wintypes.ATOM
    user32.CreateWindowExW.argtypes = [
        wintypes.DWORD,
        wintypes.LPCWSTR,
        wintypes.LPCWSTR,
        wintypes.DWORD,
        ctypes.c_int,
        ctypes.c_int,
        ctypes.c_int,
        ctypes.c_int,
        wintypes.HWND,
        wintypes.HANDLE,
        wintypes.HANDLE,
        wintypes.LPVOID,
    ]
    user32.CreateWindowExW.restype = wintypes.HWND
    user32.DestroyWindow.argtypes = [wintypes.HWND]
    user32.DestroyWindow.restype = wintypes.BOOL
    user32.DefWindowProcW.argtypes = [
        wintypes.HWND,
        wintypes.UINT,
        wintypes.WPARAM,
        wintypes.LPARAM,
    ]
    user32.DefWindowProcW.restype = LRESULT
    user32.SetWindowPos.argtypes = [
        wintypes.HWND,
        wintypes.HWND,
        ctypes.c_int,
        ctypes.c_int,
        ctypes.c_int,
        ctypes.c_int,
        wintypes.UINT,
    ]
    user32.SetWindowPos.restype = wintypes.BOOL
    user32.InvalidateRect.argtypes = [wintypes.HWND, ctypes.POINTER(wintypes.RECT), wintypes.BOOL]
    user32.InvalidateRect.restype = wintypes.BOOL
    user32.UpdateWindow.argtypes = [wintypes.HWND]
    user32.UpdateWindow.restype = wintypes.BOOL
    user32.GetClientRect.argtypes = [wintypes.HWND, ctypes.POINTER(wintypes.RECT)]
    user32.GetClientRect.restype = wintypes.BOOL
    user32.FillRect.argtypes = [wintypes.HDC, ctypes.POINTER(wintypes.RECT), wintypes.HANDLE]
    user32.FillRect.restype = ctypes.c_int
    user32.PeekMessageW.argtypes = [
        ctypes.POINTER(wintypes.MSG),
        wintypes.HWND,
        wintypes.UINT,
        wintypes.UINT,
        wintypes.UINT,
    ]
    user32.PeekMessageW.restype = wintypes.BOOL
    user32.TranslateMessage.argtypes = [ctypes.POINTER(wintypes.MSG)]
    user32.DispatchMessageW.argtypes = [ctypes.POINTER(wintypes.MSG)]
    user32.DispatchMessageW.restype = LRESULT

    gdi32.CreateSolidBrush.argtypes = [wintypes.DWORD]
    gdi32.CreateSolidBrush.restype = wintypes.HANDLE
    gdi32.DeleteObject.argtypes = [wintypes.HANDLE]
    gdi32.DeleteObject.restype = wintypes.BOOL

    dwmapi.DwmFlush.argtypes = []
    dwmapi.DwmFlush.restype = ctypes.c_long


def _last_error() -> OSError:
    return ctypes.WinError(ctypes.get_last_error())  # type: ignore[attr-defined]


# --- DPI awareness -----------------------------------------------------------


def make_dpi_aware() -> None:
    """Use physical pixels so the shield and the grabs share coordinates."""
    if not IS_WINDOWS:
        return
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(2)  # Per-Monitor V2
        LOG.debug("DPI awareness: per-monitor")
    except Exception:
        try:
            ctypes.windll.user32.SetProcessDPIAware()
            LOG.debug("DPI awareness: system")
        except Exception as e:
            LOG.warning("DPI awareness not available: %r", e)


# --- window class ------------------------------------------------------------

# hwnd -> HBRUSH currently painted by that shield
_BRUSHES: dict[int, int] = {}


def _shield_wndproc(hwnd: int, msg: int, wparam: int, lparam: int) -> int:
    if msg == WM_ERASEBKGND:
        brush = _BRUSHES.get(int(hwnd or 0))
        if brush:
            rc = wintypes.RECT()
            user32.GetClientRect(hwnd, ctypes.byref(rc))
            user32.FillRect(wparam, ctypes.byref(rc), brush)
            return 1
    elif msg == WM_NCHITTEST:
        return HTTRANSPARENT
    return user32.DefWindowProcW(hwnd, msg, wparam, lparam)


class _ShieldClass:
    """Process-wide window class registration, done once on first use."""

    _lock: Final = threading.Lock()
    _atom: int = 0
    _proc: Any = None  # ctypes callback must outlive every window

    @classmethod
    def ensure(cls) -> int:
        if cls._atom:
            return cls._atom
        with cls._lock:
            if cls._atom:
                return cls._atom
            _require_windows()
            proc = WNDPROC(_shield_wndproc)
            wc = WNDCLASSEXW()
            wc.cbSize = ctypes.sizeof(WNDCLASSEXW)
            wc.style = CS_NOCLOSE
            wc.lpfnWndProc = proc
            wc.hInstance = kernel32.GetModuleHandleW(None)
            wc.hbrBackground = None  # painted in WM_ERASEBKGND
            wc.lpszClassName = CLASS_NAME
            atom = user32.RegisterClassExW(ctypes.byref(wc))
            if not atom:
                raise SurfaceError(f"Couldn't register window class: {_last_error()}")
            cls._proc = proc
            cls._atom = int(atom)
            LOG.debug("registered window class %s (atom=%d)", CLASS_NAME, cls._atom)
        return cls._atom


def _pump() -> None:
    """Dispatch whatever is queued for this thread's windows."""
    msg = wintypes.MSG()
    while user32.PeekMessageW(ctypes.byref(msg), None, 0, 0, PM_REMOVE):
        user32.TranslateMessage(ctypes.byref(msg))
        user32.DispatchMessageW(ctypes.byref(msg))


# --- adapters ----------------------------------------------------------------


class Win32Shield(ShieldPort):
    def __init__(self, hwnd: int, background: Color) -> None:
        self._hwnd = hwnd
        self._brush: int | None = None
        self.set_background(background)

    @property
    def hwnd(self) -> int:
        return self._hwnd

    def set_background(self, color: Color) -> None:
        brush = gdi32.CreateSolidBrush(colorref(color))
        if not brush:
            raise SurfaceError(f"Couldn't create brush: {_last_error()}")
        old, self._brush = self._brush, int(brush)
        _BRUSHES[self._hwnd] = self._brush
        if old:
            gdi32.DeleteObject(old)

    def redraw(self) -> None:
        user32.InvalidateRect(self._hwnd, None, True)
        user32.UpdateWindow(self._hwnd)
        _pump()

    def destroy(self) -> None:
        if not self._hwnd:
            return
        if not user32.DestroyWindow(self._hwnd):
            LOG.warning("DestroyWindow failed: %s", _last_error())
        _BRUSHES.pop(self._hwnd, None)
        if self._brush:
            gdi32.DeleteObject(self._brush)
            self._brush = None
        self._hwnd = 0
        _pump()


class Win32ShieldFactory(ShieldFactoryPort):
    def __init__(self) -> None:
        _require_windows()

    def create(self, rect: Rect, background: Color) -> Win32Shield:
        _ShieldClass.ensure()
        hwnd = user32.CreateWindowExW(
            WS_EX_NOACTIVATE | WS_EX_TOOLWINDOW,
            CLASS_NAME,
            "Clearshot",
            WS_DISABLED | WS_POPUP,
            rect.left,
            rect.top,
            rect.width,
            rect.height,
            None,
            None,
            kernel32.GetModuleHandleW(None),
            None,
        )
        if not hwnd:
            raise SurfaceError(f"Couldn't create window: {_last_error()}")

        try:
            shield = Win32Shield(int(hwnd), background)
        except SurfaceError:
            user32.DestroyWindow(hwnd)
            raise

        # Move the shield underneath all other windows
        flags = SWP_NOSIZE | SWP_NOMOVE | SWP_SHOWWINDOW | SWP_NOACTIVATE
        if not user32.SetWindowPos(hwnd, HWND_BOTTOM, 0, 0, 0, 0, flags):
            err = _last_error()
            shield.destroy()
            raise SurfaceError(f"Couldn't show window: {err}")
        shield.redraw()
        return shield


class DwmCompositor(CompositorPort):
    def __init__(self) -> None:
        _require_windows()

    def flush(self) -> None:
        hr = dwmapi.DwmFlush()
        if hr < 0:
            # composition disabled: GDI draws straight to screen, nothing to wait for
            LOG.debug("DwmFlush returned 0x%08X", hr & 0xFFFFFFFF)
