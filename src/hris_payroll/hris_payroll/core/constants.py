"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Tarif potongan (Rupiah)
POTONGAN_TERLAMBAT = 25_000
POTONGAN_ALPA = 100_000
POTONGAN_IZIN = 50_000
POTONGAN_SAKIT = 0

# Lembur
BONUS_PER_HOUR = 50_000
MIN_OVERTIME_MINUTES = 30

# Jadwal default saat karyawan belum punya jadwal aktif
DEFAULT_START_TIME = "08:00"
DEFAULT_EARLIEST_CHECKIN = "06:00"
EARLY_CHECKIN_WINDOW_MINUTES = 60
ATTENDANCE_CLOSE_HOUR = 23

# Threshold lama untuk data absensi tanpa status
LEGACY_LATE_THRESHOLD = "08:00"

DEFAULT_BASIC_SALARY = 5_000_000
DEFAULT_SHIFT_TYPE = "Regular"
DEFAULT_BREAK_MINUTES = 60
DEFAULT_WORK_DAYS = "Mon-Fri"

MIN_PASSWORD_LENGTH = 6
DEFAULT_TOKEN_HOURS = 24
DEFAULT_RESET_TOKEN_MINUTES = 60
PAYMENT_EXPIRY_HOURS = 24

ALPHA_KETERANGAN = "Tidak hadir tanpa keterangan"
SYSTEM_ROLE = "System"
