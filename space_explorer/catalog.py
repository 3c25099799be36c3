from typing import Dict, NamedTuple

from .schemas import AsteroidType


class CatalogImage(NamedTuple):
    url: str
    description: str
    source: str


_WIKIMEDIA = "https://upload.wikimedia.org/wikipedia/commons"

# Spacecraft, radar or telescope images of named asteroids. Keys are matched
# case-sensitively against the normalized name; order matters for the
# catalog-number scan.
ASTEROID_CATALOG: Dict[str, CatalogImage] = {
    "Ceres": CatalogImage(
        f"{_WIKIMEDIA}/7/76/Ceres_-_RC3_-_Haulani_Crater_%2822381131691%29_%28cropped%29.jpg",
        "Dwarf planet Ceres photographed by NASA's Dawn spacecraft",
        "NASA/JPL-Caltech/UCLA/MPS/DLR/IDA",
    ),
    "Vesta": CatalogImage(
        f"{_WIKIMEDIA}/c/cc/Vesta_in_natural_color.jpg",
        "Asteroid Vesta in natural color, imaged by Dawn spacecraft",
        "NASA/JPL-Caltech/UCLA/MPS/DLR/IDA",
    ),
    "Bennu": CatalogImage(
        f"{_WIKIMEDIA}/8/82/Bennu_mosaic_OSIRIS-REx.jpg",
        "Near-Earth asteroid Bennu photographed by OSIRIS-REx spacecraft",
        "NASA/Goddard/University of Arizona",
    ),
    "Ryugu": CatalogImage(
        f"{_WIKIMEDIA}/1/12/Ryugu_true_color.jpg",
        "Asteroid Ryugu in true color, photographed by Hayabusa2",
        "JAXA, University of Tokyo, Kochi University, Rikkyo University, "
        "Nagoya University, Chiba Institute of Technology, Meiji University, "
        "University of Aizu, AIST",
    ),
    "Itokawa": CatalogImage(
        f"{_WIKIMEDIA}/f/f9/Itokawa8_hayabusa_1210.jpg",
        "Near-Earth asteroid Itokawa photographed by Hayabusa spacecraft",
        "JAXA",
    ),
    "Eros": CatalogImage(
        f"{_WIKIMEDIA}/5/5e/433eros.jpg",
        "Near-Earth asteroid 433 Eros photographed by NEAR Shoemaker",
        "NASA/Johns Hopkins University Applied Physics Laboratory",
    ),
    "Gaspra": CatalogImage(
        f"{_WIKIMEDIA}/5/54/951_Gaspra.jpg",
        "Asteroid 951 Gaspra photographed by Galileo spacecraft",
        "NASA/JPL",
    ),
    "Ida": CatalogImage(
        f"{_WIKIMEDIA}/b/bf/243_ida.jpg",
        "Asteroid 243 Ida and its moon Dactyl, photographed by Galileo",
        "NASA/JPL",
    ),
    "Mathilde": CatalogImage(
        f"{_WIKIMEDIA}/a/af/253_mathilde_%28crop%29.jpg",
        "Asteroid 253 Mathilde photographed by NEAR Shoemaker",
        "NASA/Johns Hopkins University Applied Physics Laboratory",
    ),
    "Steins": CatalogImage(
        f"{_WIKIMEDIA}/9/98/Asteroid_2867_Steins.jpg",
        "Asteroid 2867 Steins photographed by Rosetta spacecraft",
        "ESA ©2008 MPS for OSIRIS Team",
    ),
    "Lutetia": CatalogImage(
        f"{_WIKIMEDIA}/0/0b/21_Lutetia_from_Rosetta.jpg",
        "Asteroid 21 Lutetia photographed by Rosetta spacecraft",
        "ESA ©2010 MPS for OSIRIS Team",
    ),
    "Pallas": CatalogImage(
        f"{_WIKIMEDIA}/1/1c/2_Pallas_Hubble.jpg",
        "Asteroid 2 Pallas imaged by Hubble Space Telescope",
        "NASA/ESA/STScI",
    ),
    "Hygiea": CatalogImage(
        f"{_WIKIMEDIA}/5/5c/10_Hygiea_VLT.jpg",
        "Asteroid 10 Hygiea imaged by Very Large Telescope",
        "ESO/P. Vernazza et al./MISTRAL algorithm (ONERA/CNRS)",
    ),
    "Apophis": CatalogImage(
        f"{_WIKIMEDIA}/f/f2/99942_Apophis_radar_2012-2013.jpg",
        "Near-Earth asteroid 99942 Apophis radar image",
        "NASA/JPL-Caltech",
    ),
    "Toutatis": CatalogImage(
        f"{_WIKIMEDIA}/e/e1/4179_Toutatis.jpg",
        "Near-Earth asteroid 4179 Toutatis radar image",
        "NASA/JPL",
    ),
    "Kleopatra": CatalogImage(
        f"{_WIKIMEDIA}/5/5c/216_Kleopatra_VLT.jpg",
        "Asteroid 216 Kleopatra imaged by Very Large Telescope",
        "ESO/Vernazza, Marchis et al./MISTRAL algorithm (ONERA/CNRS)",
    ),
}

# Representative stand-ins, one per composition class.
TYPE_IMAGES: Dict[AsteroidType, CatalogImage] = {
    AsteroidType.C: CatalogImage(
        f"{_WIKIMEDIA}/8/82/Bennu_mosaic_OSIRIS-REx.jpg",
        "Representative C-type (carbonaceous) asteroid - dark and carbon-rich",
        "NASA/Goddard/University of Arizona (Representative)",
    ),
    AsteroidType.S: CatalogImage(
        f"{_WIKIMEDIA}/5/5e/433eros.jpg",
        "Representative S-type (silicaceous) asteroid - stony composition",
        "NASA/Johns Hopkins APL (Representative)",
    ),
    AsteroidType.M: CatalogImage(
        f"{_WIKIMEDIA}/1/1c/2_Pallas_Hubble.jpg",
        "Representative M-type (metallic) asteroid - metal-rich composition",
        "NASA/ESA/STScI (Representative)",
    ),
    AsteroidType.V: CatalogImage(
        f"{_WIKIMEDIA}/c/cc/Vesta_in_natural_color.jpg",
        "Representative V-type (basaltic) asteroid - volcanic composition",
        "NASA/JPL-Caltech/UCLA/MPS/DLR/IDA (Representative)",
    ),
    AsteroidType.X: CatalogImage(
        f"{_WIKIMEDIA}/f/f9/Itokawa8_hayabusa_1210.jpg",
        "Representative X-type asteroid - mixed composition",
        "JAXA (Representative)",
    ),
}

# Spectral classes of well-studied bodies, matched as substrings of the
# upper-cased name.
KNOWN_TYPES: Dict[str, AsteroidType] = {
    "BENNU": AsteroidType.C,
    "RYUGU": AsteroidType.C,
    "CERES": AsteroidType.C,
    "MATHILDE": AsteroidType.C,
    "EROS": AsteroidType.S,
    "GASPRA": AsteroidType.S,
    "IDA": AsteroidType.S,
    "ITOKAWA": AsteroidType.S,
    "TOUTATIS": AsteroidType.S,
    "PSYCHE": AsteroidType.M,
    "PALLAS": AsteroidType.M,
    "KLEOPATRA": AsteroidType.M,
    "VESTA": AsteroidType.V,
    "STEINS": AsteroidType.X,
    "LUTETIA": AsteroidType.X,
}
