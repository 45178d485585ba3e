"""Fixed constants: binary ephemeris layout, GM tables, NAIF ids, units."""

# Time
SECONDS_PER_DAY = 86400.0
J2000_JD = 2451545.0  # TDB Julian date of J2000.0 (ephemeris time zero)

# Gaussian gravitational constant squared: G in AU^3 / (Msun day^2)
GAUSS_K2 = 0.295912208285591100e-03

# Astronomical unit in km (IAU 2012)
AU_KM = 149597870.700

# Speed of light in AU/day (IAU 2012 au)
SPEED_OF_LIGHT_AU_PER_DAY = 173.14463267424034

# Binary ephemeris header layout
HEADER_OFFSET = 0x0A5C
NUM_SLOTS = 15
NUM_LEADING_SLOTS = 12  # triples before the version tag
NUM_RESERVED_RECORDS = 2
CONSTANT_NAME_BASE = 400  # constant names beyond this count shift the tail
CONSTANT_NAME_BYTES = 6

# Slot indices inside a record (order of the file's coefficient pointers)
SLOT_MERCURY = 0
SLOT_VENUS = 1
SLOT_EMB = 2
SLOT_MARS = 3
SLOT_JUPITER = 4
SLOT_SATURN = 5
SLOT_URANUS = 6
SLOT_NEPTUNE = 7
SLOT_PLUTO = 8
SLOT_MOON = 9  # geocentric
SLOT_SUN = 10
SLOT_NUTATIONS = 11
SLOT_LIBRATIONS = 12
SLOT_MANTLE = 13
SLOT_TT_TDB = 14

SLOT_NAMES = (
    'Mercury',
    'Venus',
    'Earth-Moon barycenter',
    'Mars',
    'Jupiter',
    'Saturn',
    'Uranus',
    'Neptune',
    'Pluto',
    'Moon (geocentric)',
    'Sun',
    'Nutations',
    'Lunar librations',
    'Lunar mantle',
    'TT-TDB',
)

# Components per slot; everything else is a 3-vector.
SLOT_COMPONENTS: dict[int, int] = {
    SLOT_NUTATIONS: 2,
    SLOT_TT_TDB: 1,
}

# GM of the major bodies in AU^3/day^2, indexed like query_body().
PLANET_GM = (
    0.295912208285591100e-03,  # 0  Sun
    0.491248045036476000e-10,  # 1  Mercury
    0.724345233264412000e-09,  # 2  Venus
    0.888769244512563400e-09,  # 3  Earth
    0.109318945074237400e-10,  # 4  Moon
    0.954954869555077000e-10,  # 5  Mars
    0.282534584083387000e-06,  # 6  Jupiter
    0.845970607324503000e-07,  # 7  Saturn
    0.129202482578296000e-07,  # 8  Uranus
    0.152435734788511000e-07,  # 9  Neptune
    0.217844105197418000e-11,  # 10 Pluto
)

PLANET_NAMES = (
    'Sun',
    'Mercury',
    'Venus',
    'Earth',
    'Moon',
    'Mars',
    'Jupiter',
    'Saturn',
    'Uranus',
    'Neptune',
    'Pluto',
)

# GM of the 16 massive asteroids in AU^3/day^2, indexed like query_asteroid().
ASTEROID_GM = (
    1.400476556172344e-13,  # Ceres
    3.854750187808810e-14,  # Vesta
    3.104448198938713e-14,  # Pallas
    1.235800787294125e-14,  # Hygiea
    6.343280473648602e-15,  # Euphrosyne
    5.256168678493662e-15,  # Interamnia
    5.198126979457498e-15,  # Davida
    4.678307418350905e-15,  # Eunomia
    3.617538317147937e-15,  # Juno
    3.411586826193812e-15,  # Psyche
    3.180659282652541e-15,  # Cybele
    2.577114127311047e-15,  # Thisbe
    2.531091726015068e-15,  # Doris
    2.476788101255867e-15,  # Europa
    2.295559390637462e-15,  # Patientia
    2.199295173574073e-15,  # Sylvia
)

ASTEROID_NAMES = (
    'Ceres',
    'Vesta',
    'Pallas',
    'Hygiea',
    'Euphrosyne',
    'Interamnia',
    'Davida',
    'Eunomia',
    'Juno',
    'Psyche',
    'Cybele',
    'Thisbe',
    'Doris',
    'Europa',
    'Patientia',
    'Sylvia',
)

# NAIF ids of the asteroids in the sb431-n16 kernel (2000000 + number).
ASTEROID_NAIF_IDS = (
    2000001,
    2000004,
    2000002,
    2000010,
    2000031,
    2000704,
    2000511,
    2000015,
    2000003,
    2000016,
    2000065,
    2000088,
    2000048,
    2000052,
    2000451,
    2000087,
)

SUN_NAIF_ID = 10

NUM_PLANETS = len(PLANET_GM)
NUM_ASTEROIDS = len(ASTEROID_GM)
