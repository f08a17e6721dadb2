"""
Tests for host capability providers.
"""

import pytest

from hpln.capabilities import (
    CapabilityError,
    LinuxCapabilityProvider,
    DarwinCapabilityProvider,
    PsutilCapabilityProvider,
    StaticCapabilityProvider,
    get_capability_provider,
)

MEMINFO = """\
MemTotal:       131891120 kB
MemFree:        120123456 kB
MemAvailable:   125000000 kB
"""

CPUINFO_X86 = """\
processor	: 0
vendor_id	: GenuineIntel
flags		: fpu vme sse sse2 avx avx2 avx512f avx512dq
bogomips	: 4800.00

processor	: 1
flags		: fpu vme sse sse2 avx avx2 avx512f avx512dq
"""

CPUINFO_ARM = """\
processor	: 0
BogoMIPS	: 50.00
Features	: fp asimd evtstrm aes pmull sha1 sha2 crc32 sve
"""


@pytest.fixture
def proc_files(tmp_path):
    def _write(meminfo=MEMINFO, cpuinfo=CPUINFO_X86):
        meminfo_path = tmp_path / "meminfo"
        cpuinfo_path = tmp_path / "cpuinfo"
        if meminfo is not None:
            meminfo_path.write_text(meminfo)
        if cpuinfo is not None:
            cpuinfo_path.write_text(cpuinfo)
        return LinuxCapabilityProvider(meminfo_path=str(meminfo_path), cpuinfo_path=str(cpuinfo_path))
    return _write


class TestLinuxProvider:

    @pytest.mark.capabilities
    def test_memtotal(self, proc_files):
        assert proc_files().total_memory_kib() == 131891120

    @pytest.mark.capabilities
    def test_x86_flags(self, proc_files):
        flags = proc_files().cpu_flags()
        assert "avx512f" in flags
        assert "avx2" in flags

    @pytest.mark.capabilities
    def test_arm_features(self, proc_files):
        flags = proc_files(cpuinfo=CPUINFO_ARM).cpu_flags()
        assert "sve" in flags
        assert "avx512f" not in flags

    @pytest.mark.capabilities
    def test_missing_meminfo(self, proc_files):
        with pytest.raises(CapabilityError, match="cannot read"):
            proc_files(meminfo=None).total_memory_kib()

    @pytest.mark.capabilities
    def test_meminfo_without_memtotal(self, proc_files):
        with pytest.raises(CapabilityError, match="no MemTotal"):
            proc_files(meminfo="MemFree: 10 kB\n").total_memory_kib()

    @pytest.mark.capabilities
    def test_malformed_memtotal(self, proc_files):
        with pytest.raises(CapabilityError, match="malformed"):
            proc_files(meminfo="MemTotal: lots kB\n").total_memory_kib()

    @pytest.mark.capabilities
    def test_missing_cpuinfo_means_no_flags(self, proc_files):
        assert proc_files(cpuinfo=None).cpu_flags() == frozenset()


class TestDarwinProvider:

    @pytest.mark.capabilities
    def test_memsize(self, monkeypatch):
        monkeypatch.setattr("hpln.capabilities.run_cmd", lambda cmd: str(64 * 1024 ** 3))
        assert DarwinCapabilityProvider().total_memory_kib() == 64 * 1024 * 1024

    @pytest.mark.capabilities
    def test_memsize_failure(self, monkeypatch):
        def fail(cmd):
            raise RuntimeError("sysctl: unknown oid")
        monkeypatch.setattr("hpln.capabilities.run_cmd", fail)
        with pytest.raises(CapabilityError):
            DarwinCapabilityProvider().total_memory_kib()

    @pytest.mark.capabilities
    def test_flags_merge_leaf7(self, monkeypatch):
        outputs = {
            "machdep.cpu.features": "FPU SSE SSE2 AVX1.0",
            "machdep.cpu.leaf7_features": "AVX2 AVX512F AVX512DQ",
        }
        monkeypatch.setattr("hpln.capabilities.run_cmd", lambda cmd: outputs[cmd[-1]])
        flags = DarwinCapabilityProvider().cpu_flags()
        assert "avx512f" in flags
        assert "sse2" in flags

    @pytest.mark.capabilities
    def test_flags_unavailable(self, monkeypatch):
        def fail(cmd):
            raise RuntimeError("sysctl: unknown oid")
        monkeypatch.setattr("hpln.capabilities.run_cmd", fail)
        assert DarwinCapabilityProvider().cpu_flags() == frozenset()


class TestOtherProviders:

    @pytest.mark.capabilities
    def test_psutil_memory(self):
        provider = PsutilCapabilityProvider()
        assert provider.total_memory_kib() > 0
        assert provider.cpu_flags() == frozenset()

    @pytest.mark.capabilities
    def test_static_lowercases_flags(self):
        provider = StaticCapabilityProvider(memory_kib=1024, flags=["AVX512F"])
        assert provider.cpu_flags() == frozenset({"avx512f"})
        assert provider.total_memory_kib() == 1024

    @pytest.mark.capabilities
    def test_static_without_memory(self, host_unknown_memory):
        with pytest.raises(CapabilityError):
            host_unknown_memory.total_memory_kib()

    @pytest.mark.capabilities
    @pytest.mark.parametrize("system,expected", [
        ("Linux", LinuxCapabilityProvider),
        ("Darwin", DarwinCapabilityProvider),
        ("Windows", PsutilCapabilityProvider),
        ("FreeBSD", PsutilCapabilityProvider),
    ])
    def test_selection(self, system, expected):
        assert isinstance(get_capability_provider(system), expected)
