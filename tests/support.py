"""
Bilingual three-role dataset used across the test suite.

Layout written by `write_dataset(root)`:

  root/es/<role>.json      role documents, Spanish text
  root/en/<role>.json      role documents, English text
  root/role-names.json     canonical role -> {es, en}

Core competencies slide one skill per level (level n holds skills n..n+4),
so consecutive levels share four core competencies. Complementary
competencies switch from a junior pair to a senior pair at L5, and the pairs
are the same for every role.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from tech_roles.config import LibraryOptions
from tech_roles.core.models import Entry, YearsRange
from tech_roles.core.translator import role_translation_filename
from tech_roles.library import TechRolesLibrary

Pair = Tuple[str, str]  # (en, es)

LEVEL_NAMES: List[Pair] = [
    ("L1 - Trainee", "L1 - Aprendiz"),
    ("L2 - Junior I", "L2 - Junior I"),
    ("L3 - Junior II", "L3 - Junior II"),
    ("L4 - Mid-Level I", "L4 - Intermedio I"),
    ("L5 - Mid-Level II", "L5 - Intermedio II"),
    ("L6 - Senior I", "L6 - Senior I"),
    ("L7 - Senior II", "L7 - Senior II"),
    ("L8 - Staff", "L8 - Staff"),
    ("L9 - Principal", "L9 - Principal"),
]

YEARS: List[Tuple[int, Optional[int]]] = [
    (0, 1), (1, 2), (2, 3), (3, 5), (5, 7), (7, 9), (9, 12), (12, 15), (15, None),
]

JUNIOR_COMPLEMENTARY: List[Pair] = [
    ("Version control with Git", "Control de versiones con Git"),
    ("Code review", "Revisión de código"),
]
SENIOR_COMPLEMENTARY: List[Pair] = [
    ("Mentoring junior engineers", "Mentoría de ingenieros junior"),
    ("Architecture design reviews", "Revisiones de diseño de arquitectura"),
]

ROLES: List[Dict] = [
    {
        "role": "Backend Developer",
        "es": "Desarrollador Backend",
        "category": "Software Engineering",
        "prefix": "BE",
        "skills": [
            ("HTTP fundamentals", "Fundamentos de HTTP"),
            ("SQL queries", "Consultas SQL"),
            ("REST API development", "Desarrollo de APIs REST"),
            ("Unit testing", "Pruebas unitarias"),
            ("Database modeling", "Modelado de bases de datos"),
            ("Caching strategies", "Estrategias de caché"),
            ("Message queues", "Colas de mensajes"),
            ("Performance tuning", "Optimización de rendimiento"),
            ("Distributed systems", "Sistemas distribuidos"),
            ("Service observability", "Observabilidad de servicios"),
            ("Capacity planning", "Planificación de capacidad"),
            ("Platform roadmap", "Hoja de ruta de plataforma"),
            ("Technical governance", "Gobernanza técnica"),
        ],
    },
    {
        "role": "Frontend Developer",
        "es": "Desarrollador Frontend",
        "category": "Software Engineering",
        "prefix": "FE",
        "skills": [
            ("HTML semantics", "Semántica HTML"),
            ("CSS layout", "Maquetación CSS"),
            ("JavaScript fundamentals", "Fundamentos de JavaScript"),
            ("Unit testing", "Pruebas unitarias"),
            ("Component frameworks", "Frameworks de componentes"),
            ("State management", "Manejo de estado"),
            ("Web accessibility", "Accesibilidad web"),
            ("Performance tuning", "Optimización de rendimiento"),
            ("Build tooling", "Herramientas de build"),
            ("Design systems", "Sistemas de diseño"),
            ("Micro-frontends", "Micro-frontends"),
            ("Rendering pipelines", "Pipelines de renderizado"),
            ("Web platform standards", "Estándares de la plataforma web"),
        ],
    },
    {
        "role": "Data Engineer",
        "es": "Ingeniero de Datos",
        "category": "Data",
        "prefix": "DE",
        "skills": [
            ("Python scripting", "Scripting en Python"),
            ("SQL queries", "Consultas SQL"),
            ("ETL pipelines", "Pipelines ETL"),
            ("Data quality checks", "Controles de calidad de datos"),
            ("Batch processing", "Procesamiento por lotes"),
            ("Stream processing", "Procesamiento en streaming"),
            ("Data warehousing", "Almacenes de datos"),
            ("Workflow orchestration", "Orquestación de flujos"),
            ("Lakehouse formats", "Formatos lakehouse"),
            ("Cost optimization", "Optimización de costes"),
            ("Data contracts", "Contratos de datos"),
            ("Data mesh adoption", "Adopción de data mesh"),
            ("Data platform ownership", "Propiedad de la plataforma de datos"),
        ],
    },
]

ROLE_NAMES = [r["role"] for r in ROLES]


def _pick(pairs: List[Pair], language: str) -> List[str]:
    index = 0 if language == "en" else 1
    return [pair[index] for pair in pairs]


def indicators_for(level: int, language: str) -> List[str]:
    if language == "en":
        return [f"Works with level {level} autonomy", f"Delivers L{level} outcomes"]
    return [f"Trabaja con autonomía de nivel {level}", f"Entrega resultados de L{level}"]


def role_document(definition: Dict, language: str) -> Dict:
    levels = {}
    for number in range(1, 10):
        years_min, years_max = YEARS[number - 1]
        complementary = JUNIOR_COMPLEMENTARY if number < 5 else SENIOR_COMPLEMENTARY
        levels[f"{definition['prefix']}-L{number}"] = {
            "level": LEVEL_NAMES[number - 1][0 if language == "en" else 1],
            "levelNumber": number,
            "yearsRange": {"min": years_min, "max": years_max},
            "coreCompetencies": _pick(definition["skills"][number - 1:number + 4], language),
            "complementaryCompetencies": _pick(complementary, language),
            "indicators": indicators_for(number, language),
        }
    return {"role": definition["role"], "category": definition["category"], "levels": levels}


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def write_dataset(root: Path) -> Path:
    root = Path(root)
    for language in ("en", "es"):
        for definition in ROLES:
            write_json(root / language / role_translation_filename(definition["role"]), role_document(definition, language))
    write_json(
        root / "role-names.json",
        {definition["role"]: {"en": definition["role"], "es": definition["es"]} for definition in ROLES},
    )
    return root


def make_entry(
    role: str = "Backend Developer",
    level_number: int = 1,
    *,
    code: Optional[str] = None,
    category: str = "Software Engineering",
    core: Optional[List[str]] = None,
    complementary: Optional[List[str]] = None,
    indicators: Optional[List[str]] = None,
    years: Tuple[int, Optional[int]] = (0, 1),
) -> Entry:
    return Entry(
        category=category,
        role=role,
        level=f"L{level_number}",
        code=code or f"BE-L{level_number}",
        level_number=level_number,
        years_range=YearsRange(min=years[0], max=years[1]),
        core_competencies=list(core if core is not None else ["Basic HTTP", "Simple queries"]),
        complementary_competencies=list(complementary if complementary is not None else ["Git basics"]),
        indicators=list(indicators if indicators is not None else ["Requires supervision"]),
    )


class DatasetMixin:
    """unittest mixin: writes the dataset into a temp dir for each test."""

    language = "en"

    def setUp(self):
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.data_root = write_dataset(Path(self._tmp.name))

    def make_library(self, language: Optional[str] = None, **kwargs) -> TechRolesLibrary:
        options = LibraryOptions(
            language=language or self.language,
            translations_dir=self.data_root,
            role_names_path=self.data_root / "role-names.json",
            **kwargs,
        )
        return TechRolesLibrary(options)
