"""
Section catalog of the digital book.

The eight sections of the "Libro del Edificio", in wizard order. Each entry
carries its UI id, the canonical type the backend stores it under, display
metadata and the form schema. The catalog is closed and never reordered at
runtime.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class FieldKind(str, Enum):
    """Form control used to edit a field."""
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    DATE = "date"


@dataclass(frozen=True)
class FieldDefinition:
    """One form field of a section."""
    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    options: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class SectionDefinition:
    """Static catalog entry for a section."""
    id: str
    canonical_type: str
    title: str
    description: str
    fields: Tuple[FieldDefinition, ...]

    @property
    def required_fields(self) -> Tuple[FieldDefinition, ...]:
        return tuple(f for f in self.fields if f.required)

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


SECTION_CATALOG: Tuple[SectionDefinition, ...] = (
    SectionDefinition(
        id="general_data",
        canonical_type="general_data",
        title="Datos generales del edificio",
        description="Información básica y características principales",
        fields=(
            FieldDefinition("identification", "Identificación del edificio", FieldKind.TEXTAREA, True),
            FieldDefinition("ownership", "Titularidad", FieldKind.TEXT, True),
            FieldDefinition(
                "building_typology",
                "Tipología detallada",
                FieldKind.SELECT,
                True,
                ("Residencial", "Comercial", "Mixto", "Industrial"),
            ),
            FieldDefinition("primary_use", "Uso principal", FieldKind.TEXT, True),
            FieldDefinition("construction_date", "Fecha de construcción", FieldKind.DATE, True),
        ),
    ),
    SectionDefinition(
        id="construction_features",
        canonical_type="construction_features",
        title="Características constructivas y técnicas",
        description="Especificaciones técnicas de construcción",
        fields=(
            FieldDefinition("materials", "Materiales principales", FieldKind.TEXTAREA, True),
            FieldDefinition("insulation_systems", "Sistemas de aislamiento", FieldKind.TEXTAREA, True),
            FieldDefinition("structural_system", "Sistema estructural", FieldKind.TEXT, True),
            FieldDefinition("facade_type", "Tipo de fachada", FieldKind.TEXT, True),
            FieldDefinition("roof_type", "Tipo de cubierta", FieldKind.TEXT),
        ),
    ),
    SectionDefinition(
        id="certificates",
        canonical_type="certificates_and_licenses",
        title="Certificados y licencias",
        description="Documentación legal y certificaciones",
        fields=(
            FieldDefinition("energy_certificate", "Certificado energético (CEE)", FieldKind.TEXT, True),
            FieldDefinition("building_permits", "Licencias de obra", FieldKind.TEXTAREA, True),
            FieldDefinition("habitability_license", "Licencia de habitabilidad", FieldKind.TEXT),
            FieldDefinition("fire_certificate", "Certificado contra incendios", FieldKind.TEXT),
            FieldDefinition("accessibility_certificate", "Certificado de accesibilidad", FieldKind.TEXT),
        ),
    ),
    SectionDefinition(
        id="maintenance",
        canonical_type="maintenance_and_conservation",
        title="Mantenimiento y conservación",
        description="Historial y planes de mantenimiento",
        fields=(
            FieldDefinition("preventive_plan", "Plan de mantenimiento preventivo", FieldKind.TEXTAREA, True),
            FieldDefinition("inspection_schedule", "Programa de revisiones", FieldKind.TEXTAREA, True),
            FieldDefinition("incident_history", "Historial de incidencias", FieldKind.TEXTAREA),
            FieldDefinition("maintenance_contracts", "Contratos de mantenimiento activos", FieldKind.TEXTAREA),
        ),
    ),
    SectionDefinition(
        id="installations",
        canonical_type="facilities_and_consumption",
        title="Instalaciones y consumos",
        description="Sistemas e instalaciones del edificio",
        fields=(
            FieldDefinition("electrical_system", "Sistema eléctrico", FieldKind.TEXTAREA, True),
            FieldDefinition("water_system", "Sistema de agua", FieldKind.TEXTAREA, True),
            FieldDefinition("gas_system", "Sistema de gas", FieldKind.TEXTAREA),
            FieldDefinition("hvac_system", "Sistema HVAC", FieldKind.TEXTAREA, True),
            FieldDefinition("consumption_history", "Historial de consumos", FieldKind.TEXTAREA),
        ),
    ),
    SectionDefinition(
        id="reforms",
        canonical_type="renovations_and_rehabilitations",
        title="Reformas y rehabilitaciones",
        description="Historial de modificaciones y mejoras",
        fields=(
            FieldDefinition("renovation_history", "Historial de obras", FieldKind.TEXTAREA, True),
            FieldDefinition("structural_modifications", "Modificaciones estructurales", FieldKind.TEXTAREA),
            FieldDefinition("permits_renovations", "Permisos de reformas", FieldKind.TEXTAREA),
            FieldDefinition("improvement_investments", "Inversiones en mejoras", FieldKind.TEXT),
        ),
    ),
    SectionDefinition(
        id="sustainability",
        canonical_type="sustainability_and_esg",
        title="Sostenibilidad y ESG",
        description="Criterios ambientales y sostenibilidad",
        fields=(
            FieldDefinition("energy_indicators", "Indicadores energéticos", FieldKind.TEXTAREA, True),
            FieldDefinition("emissions", "Emisiones de CO2", FieldKind.TEXT, True),
            FieldDefinition("water_footprint", "Huella hídrica", FieldKind.TEXT),
            FieldDefinition("waste_management", "Gestión de residuos", FieldKind.TEXTAREA),
            FieldDefinition("green_certifications", "Certificaciones verdes", FieldKind.TEXTAREA),
        ),
    ),
    SectionDefinition(
        id="attachments",
        canonical_type="annex_documents",
        title="Documentos anexos",
        description="Documentación adicional y anexos",
        fields=(
            FieldDefinition("technical_drawings", "Planos técnicos", FieldKind.TEXTAREA),
            FieldDefinition("operation_manuals", "Manuales de funcionamiento", FieldKind.TEXTAREA),
            FieldDefinition("financial_reports", "Informes financieros", FieldKind.TEXTAREA),
            FieldDefinition("insurance_policies", "Pólizas de seguro", FieldKind.TEXTAREA),
            FieldDefinition("legal_documents", "Documentos legales", FieldKind.TEXTAREA),
        ),
    ),
)

SECTION_IDS: Tuple[str, ...] = tuple(s.id for s in SECTION_CATALOG)
TOTAL_SECTIONS = len(SECTION_CATALOG)

_BY_ID: Dict[str, SectionDefinition] = {s.id: s for s in SECTION_CATALOG}


def get_section(section_id: str) -> Optional[SectionDefinition]:
    """Get a catalog entry by UI id."""
    return _BY_ID.get(section_id)


def section_index(section_id: str) -> int:
    """Wizard position of a UI id, or -1 if it is not in the catalog."""
    try:
        return SECTION_IDS.index(section_id)
    except ValueError:
        return -1
