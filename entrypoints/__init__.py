"""Per-platform wiring of OS interface implementations."""

import sys

from os_interfaces.base import OSImplementations


def default_os_implementations() -> OSImplementations:
  """OS interfaces for the platform this process runs on"""
  if hasattr(sys, "getandroidapilevel"):
    from .android import android_os_implementations

    return android_os_implementations()

  from .linux import linux_os_implementations

  return linux_os_implementations()
