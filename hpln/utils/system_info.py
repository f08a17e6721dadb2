import psutil
import platform


def total_ram(size_unit="Bytes"):
    vm = psutil.virtual_memory()
    if size_unit == "GB":
        return vm.total / (1024 ** 3)
    elif size_unit == "MB":
        return vm.total / (1024 ** 2)
    elif size_unit == "KB":
        return vm.total / 1024
    return vm.total


def platform_system():
    """Operating system name as reported by ``platform.system()``."""
    return platform.system()
