from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from loguru import logger

GENERIC_CONDITION_DESCRIPTION = "Medical condition affecting health."


def normalize_symptom(text: str) -> str:
    """Lowercase, trim and collapse whitespace so free text matches table keys"""
    return " ".join(text.split()).lower()


@dataclass(frozen=True)
class ConditionAssociation:
    condition: str
    likelihood: float  # 0-1, 1 = strongly associated
    severity: int  # 1-5
    key_symptom: bool  # definitive symptom for the condition


@dataclass(frozen=True)
class MedicalCondition:
    name: str
    description: str
    severity: int
    symptoms: Tuple[str, ...]
    red_flags: Tuple[str, ...]
    common_treatments: Tuple[str, ...]
    when_to_seek_help: str


@dataclass(frozen=True)
class SeverityLevel:
    level: int
    label: str
    description: str


@dataclass(frozen=True)
class CombinationRule:
    """Symptoms that together raise urgency beyond their individual weight."""
    name: str
    symptoms: FrozenSet[str]
    bonus: float

    def matches(self, reported: FrozenSet[str]) -> bool:
        return self.symptoms <= reported


SEVERITY_LEVELS = {
    1: ("Mild", "Minor discomfort that doesn't significantly affect daily activities."),
    2: ("Moderate", "Noticeable symptoms that may interfere with some daily activities."),
    3: ("Severe", "Significant symptoms that substantially impact daily activities."),
    4: ("Very Severe", "Extreme symptoms that prevent normal functioning."),
    5: ("Critical", "Life-threatening symptoms requiring immediate medical attention."),
}

# How long symptoms have lasted scales urgency
DURATION_IMPACT = {
    "hours": 1.5,   # acute onset
    "days": 1.2,
    "weeks": 1.0,
    "months": 0.8,  # chronic, less urgent unless severe
    "years": 0.7,
}

HIGH_SEVERITY_THRESHOLD = 4
HIGH_SEVERITY_BONUS = 1.0

COMBINATION_RULES = (
    # (name, symptoms, bonus)
    ("cardiopulmonary", ("chest pain", "shortness of breath"), 2.0),
    ("meningitis", ("fever", "headache", "stiff neck"), 2.0),
    ("neurological", ("headache", "vision changes"), 1.0),
)

BODY_AREA_SYMPTOMS = {
    "head": [
        "headache", "dizziness", "vision changes", "hearing changes", "facial pain",
        "confusion", "memory issues", "eye pain", "eye redness", "ear pain",
        "ringing in ears",
    ],
    "chest": [
        "chest pain", "shortness of breath", "palpitations", "cough", "wheezing",
        "difficulty breathing", "chest tightness",
    ],
    "abdomen": [
        "abdominal pain", "nausea", "vomiting", "diarrhea", "constipation", "bloating",
        "loss of appetite", "difficulty swallowing", "blood in stool", "heartburn",
    ],
    "musculoskeletal": [
        "joint pain", "muscle pain", "back pain", "stiffness", "swelling",
        "limited range of motion", "weakness", "cramping",
    ],
    "skin": [
        "rash", "itching", "discoloration", "dryness", "swelling", "hives",
        "bruising", "lumps",
    ],
    "general": [
        "fever", "fatigue", "weight loss", "weight gain", "night sweats", "chills",
        "weakness", "malaise",
    ],
    "urinary": [
        "frequent urination", "painful urination", "blood in urine", "urgency",
        "incontinence", "decreased urine output",
    ],
    "neurological": [
        "numbness", "tingling", "weakness", "seizures", "tremors",
        "difficulty speaking", "difficulty walking", "loss of consciousness",
    ],
    "psychological": [
        "anxiety", "depression", "mood changes", "sleep disturbances",
        "hallucinations", "difficulty concentrating", "irritability",
    ],
}

# symptom -> [(condition, likelihood, severity, key symptom)]
SYMPTOM_CONDITION_MAP = {
    # Head
    "headache": [
        ("Tension Headache", 0.8, 1, True),
        ("Migraine", 0.7, 2, True),
        ("Sinusitis", 0.5, 1, False),
        ("Hypertension", 0.3, 3, False),
        ("Meningitis", 0.2, 5, False),
    ],
    "dizziness": [
        ("Inner Ear Infection", 0.6, 2, True),
        ("Vertigo", 0.7, 2, True),
        ("Anemia", 0.4, 2, False),
        ("Hypoglycemia", 0.3, 2, False),
        ("Stroke", 0.2, 5, False),
    ],
    "vision changes": [
        ("Migraine", 0.5, 2, False),
        ("Glaucoma", 0.4, 3, True),
        ("Cataracts", 0.3, 2, True),
        ("Diabetic Retinopathy", 0.3, 3, True),
        ("Stroke", 0.2, 5, False),
    ],
    # Chest
    "chest pain": [
        ("Heartburn/GERD", 0.6, 1, True),
        ("Anxiety", 0.5, 2, False),
        ("Costochondritis", 0.4, 1, True),
        ("Angina", 0.3, 3, True),
        ("Heart Attack", 0.2, 5, True),
        ("Pulmonary Embolism", 0.2, 5, True),
    ],
    "shortness of breath": [
        ("Asthma", 0.7, 3, True),
        ("Anxiety", 0.6, 2, False),
        ("Pneumonia", 0.4, 3, True),
        ("COPD", 0.4, 3, True),
        ("Heart Failure", 0.3, 4, True),
        ("Pulmonary Embolism", 0.2, 5, True),
    ],
    "cough": [
        ("Common Cold", 0.8, 1, True),
        ("Bronchitis", 0.6, 2, True),
        ("Asthma", 0.5, 3, False),
        ("Pneumonia", 0.4, 3, True),
        ("COVID-19", 0.3, 3, True),
    ],
    # Abdomen
    "abdominal pain": [
        ("Gastroenteritis", 0.7, 2, True),
        ("Irritable Bowel Syndrome", 0.6, 2, True),
        ("Appendicitis", 0.3, 4, True),
        ("Gallstones", 0.4, 3, True),
        ("Pancreatitis", 0.2, 4, True),
    ],
    "nausea": [
        ("Gastroenteritis", 0.8, 2, True),
        ("Food Poisoning", 0.7, 2, True),
        ("Migraine", 0.4, 2, False),
        ("Pregnancy", 0.3, 1, False),
        ("Appendicitis", 0.2, 4, False),
    ],
    "diarrhea": [
        ("Gastroenteritis", 0.8, 2, True),
        ("Food Poisoning", 0.7, 2, True),
        ("Irritable Bowel Syndrome", 0.5, 2, True),
        ("Inflammatory Bowel Disease", 0.3, 3, True),
        ("Celiac Disease", 0.2, 2, True),
    ],
    # Musculoskeletal
    "joint pain": [
        ("Osteoarthritis", 0.7, 2, True),
        ("Rheumatoid Arthritis", 0.5, 3, True),
        ("Gout", 0.4, 2, True),
        ("Tendinitis", 0.5, 1, True),
        ("Lupus", 0.2, 3, False),
    ],
    "back pain": [
        ("Muscle Strain", 0.8, 1, True),
        ("Herniated Disc", 0.5, 3, True),
        ("Sciatica", 0.5, 2, True),
        ("Osteoporosis", 0.3, 2, False),
        ("Kidney Infection", 0.2, 3, False),
    ],
    # General
    "fever": [
        ("Common Cold", 0.7, 1, True),
        ("Influenza", 0.8, 2, True),
        ("COVID-19", 0.5, 3, True),
        ("Pneumonia", 0.4, 3, False),
        ("Meningitis", 0.2, 5, False),
    ],
    "fatigue": [
        ("Anemia", 0.6, 2, True),
        ("Depression", 0.5, 3, True),
        ("Hypothyroidism", 0.5, 2, True),
        ("Chronic Fatigue Syndrome", 0.4, 3, True),
        ("Sleep Apnea", 0.4, 2, True),
    ],
    # Skin
    "rash": [
        ("Contact Dermatitis", 0.7, 1, True),
        ("Eczema", 0.6, 2, True),
        ("Psoriasis", 0.5, 2, True),
        ("Allergic Reaction", 0.5, 2, True),
        ("Shingles", 0.3, 3, True),
    ],
    "itching": [
        ("Allergic Reaction", 0.7, 2, True),
        ("Eczema", 0.6, 2, True),
        ("Contact Dermatitis", 0.6, 1, True),
        ("Dry Skin", 0.5, 1, True),
        ("Psoriasis", 0.4, 2, False),
    ],
}

# Condition details. Not every condition in the symptom map has an entry.
MEDICAL_CONDITIONS = {
    "Common Cold": {
        "description": "A viral infection of the upper respiratory tract, primarily the nose and throat.",
        "severity": 1,
        "symptoms": ["cough", "runny nose", "sore throat", "sneezing", "congestion", "mild fever"],
        "red_flags": ["high fever", "severe headache", "shortness of breath", "chest pain"],
        "common_treatments": [
            "Rest and fluid intake",
            "Over-the-counter pain relievers",
            "Decongestants",
        ],
        "when_to_seek_help": "If symptoms persist for more than 10 days or are unusually severe.",
    },
    "Influenza": {
        "description": "A viral infection that attacks your respiratory system: your nose, throat, and lungs.",
        "severity": 2,
        "symptoms": ["fever", "chills", "muscle aches", "cough", "fatigue", "headache", "sore throat"],
        "red_flags": ["difficulty breathing", "chest pain", "severe weakness", "persistent fever"],
        "common_treatments": [
            "Rest and hydration",
            "Antiviral medications (if diagnosed early)",
            "Pain relievers for fever and aches",
        ],
        "when_to_seek_help": "If you have trouble breathing, persistent high fever, or belong to a high-risk group.",
    },
    "Tension Headache": {
        "description": (
            "The most common type of headache, characterized by mild to moderate pain "
            "often described as feeling like a tight band around the head."
        ),
        "severity": 1,
        "symptoms": ["headache", "tenderness in scalp", "sensitivity to light", "tightness in neck muscles"],
        "red_flags": [
            "sudden severe headache", "headache with fever", "headache after injury",
            "changed pattern of headaches",
        ],
        "common_treatments": [
            "Over-the-counter pain relievers",
            "Stress management techniques",
            "Regular sleep schedule",
        ],
        "when_to_seek_help": "If headaches are frequent, severe, or interfere with daily activities.",
    },
    "Migraine": {
        "description": (
            "A neurological condition characterized by intense, debilitating headaches, "
            "often accompanied by other symptoms."
        ),
        "severity": 2,
        "symptoms": ["headache", "nausea", "vomiting", "sensitivity to light", "vision changes", "dizziness"],
        "red_flags": [
            "worst headache of your life", "headache with fever and stiff neck",
            "headache with confusion",
        ],
        "common_treatments": [
            "Rest in a quiet, dark room",
            "Prescription migraine medications",
            "Over-the-counter pain relievers",
            "Preventive medications for frequent migraines",
        ],
        "when_to_seek_help": "If migraines are frequent, severe, or accompanied by neurological symptoms.",
    },
    "Gastroenteritis": {
        "description": (
            "Inflammation of the stomach and intestines, typically resulting from a viral "
            "or bacterial infection."
        ),
        "severity": 2,
        "symptoms": ["nausea", "vomiting", "diarrhea", "abdominal pain", "fever", "headache"],
        "red_flags": [
            "blood in stool", "severe abdominal pain", "inability to keep fluids down",
            "signs of dehydration",
        ],
        "common_treatments": [
            "Fluid replacement to prevent dehydration",
            "Gradual reintroduction of food",
            "Rest",
        ],
        "when_to_seek_help": "If symptoms are severe, persistent, or accompanied by signs of dehydration.",
    },
    "Asthma": {
        "description": (
            "A condition in which your airways narrow and swell and may produce extra mucus, "
            "making breathing difficult."
        ),
        "severity": 3,
        "symptoms": [
            "shortness of breath", "chest tightness", "wheezing", "cough",
            "trouble sleeping due to breathing issues",
        ],
        "red_flags": [
            "severe difficulty breathing", "rapid worsening of symptoms",
            "no improvement with rescue inhaler",
        ],
        "common_treatments": [
            "Rescue inhalers for quick relief",
            "Long-term control medications",
            "Identifying and avoiding triggers",
        ],
        "when_to_seek_help": (
            "If you experience severe shortness of breath or your symptoms don't improve "
            "with use of a rescue inhaler."
        ),
    },
}


@dataclass(frozen=True)
class KnowledgeBase:
    """Read-only medical tables consumed by the triage scorer.

    Every lookup degrades to an empty result on a miss: symptom text comes
    straight from patients and rarely matches the vocabulary exactly.
    """
    body_area_symptoms: Mapping[str, Tuple[str, ...]]
    symptom_condition_map: Mapping[str, Tuple[ConditionAssociation, ...]]
    medical_conditions: Mapping[str, MedicalCondition]
    duration_impact: Mapping[str, float]
    severity_levels: Mapping[int, SeverityLevel]
    combination_rules: Tuple[CombinationRule, ...] = field(default_factory=tuple)
    high_severity_threshold: int = HIGH_SEVERITY_THRESHOLD
    high_severity_bonus: float = HIGH_SEVERITY_BONUS

    def associations_for(self, symptom: str) -> Tuple[ConditionAssociation, ...]:
        return self.symptom_condition_map.get(normalize_symptom(symptom), ())

    def condition(self, name: str) -> Optional[MedicalCondition]:
        return self.medical_conditions.get(name)

    def describe_condition(self, name: str) -> str:
        details = self.condition(name)
        return details.description if details else GENERIC_CONDITION_DESCRIPTION

    def duration_factor(self, duration: str) -> float:
        return self.duration_impact.get(duration, 1.0)

    def body_areas(self) -> Tuple[str, ...]:
        return tuple(self.body_area_symptoms)

    def symptoms_for_area(self, area: str) -> Tuple[str, ...]:
        return self.body_area_symptoms.get(normalize_symptom(area), ())

    def severity_level(self, level: int) -> Optional[SeverityLevel]:
        return self.severity_levels.get(level)

    def missing_conditions(self) -> Tuple[str, ...]:
        """Conditions referenced by the symptom map that have no detail entry"""
        referenced = {
            assoc.condition
            for associations in self.symptom_condition_map.values()
            for assoc in associations
        }
        return tuple(sorted(referenced - set(self.medical_conditions)))


def build_knowledge_base(
    symptom_condition_map: Optional[Dict] = None,
    medical_conditions: Optional[Dict] = None,
) -> KnowledgeBase:
    """Freeze the literal tables into a KnowledgeBase.

    Both tables can be overridden, mostly so tests can exercise small
    hand-built vocabularies.
    """
    symptom_condition_map = SYMPTOM_CONDITION_MAP if symptom_condition_map is None else symptom_condition_map
    medical_conditions = MEDICAL_CONDITIONS if medical_conditions is None else medical_conditions

    associations = {
        normalize_symptom(symptom): tuple(
            ConditionAssociation(condition, likelihood, severity, key_symptom)
            for condition, likelihood, severity, key_symptom in entries
        )
        for symptom, entries in symptom_condition_map.items()
    }
    conditions = {
        name: MedicalCondition(
            name=name,
            description=info["description"],
            severity=info["severity"],
            symptoms=tuple(info.get("symptoms", ())),
            red_flags=tuple(info.get("red_flags", ())),
            common_treatments=tuple(info.get("common_treatments", ())),
            when_to_seek_help=info.get("when_to_seek_help", ""),
        )
        for name, info in medical_conditions.items()
    }

    kb = KnowledgeBase(
        body_area_symptoms=MappingProxyType(
            {area: tuple(symptoms) for area, symptoms in BODY_AREA_SYMPTOMS.items()}
        ),
        symptom_condition_map=MappingProxyType(associations),
        medical_conditions=MappingProxyType(conditions),
        duration_impact=MappingProxyType(dict(DURATION_IMPACT)),
        severity_levels=MappingProxyType(
            {level: SeverityLevel(level, label, text) for level, (label, text) in SEVERITY_LEVELS.items()}
        ),
        combination_rules=tuple(
            CombinationRule(name, frozenset(normalize_symptom(s) for s in symptoms), bonus)
            for name, symptoms, bonus in COMBINATION_RULES
        ),
    )

    missing = kb.missing_conditions()
    if missing:
        logger.debug("{} conditions have no detail entry, using generic description: {}", len(missing), ", ".join(missing))
    return kb


@lru_cache(maxsize=1)
def get_knowledge_base() -> KnowledgeBase:
    """Process-wide knowledge base, built on first use"""
    kb = build_knowledge_base()
    logger.info(
        "Knowledge base loaded: {} symptoms, {} detailed conditions",
        len(kb.symptom_condition_map),
        len(kb.medical_conditions),
    )
    return kb
