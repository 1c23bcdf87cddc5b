"""
Built-in survey template catalogue.

Each entry is the JSON form of a ``SurveyTemplate``: sections of questions,
the scoring logic and the interpretation bands. Point tables follow the
published instruments:

- ASA Physical Status Classification (ASA House of Delegates, 2020 update)
- Revised Cardiac Risk Index (Lee et al., Circulation 1999)
- Goldman Cardiac Risk Index (Goldman et al., NEJM 1977)
- Caprini VTE risk assessment (Caprini, Dis Mon 2005)
- BASDAI (Garrett et al., J Rheumatol 1994)
- DAS28-CRP (Wells et al., Ann Rheum Dis 2009)
- BVAS v3 (Mukhtyar et al., Ann Rheum Dis 2009), new or worse items
"""

ASA_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e01",
    "code": "ASA",
    "name": "ASA Physical Status Classification",
    "description": "Pre-anaesthesia assessment of the patient's physical status.",
    "category": "anesthesiology",
    "questions": [
        {
            "section": "status",
            "title": "Physical status",
            "questions": [
                {
                    "id": "asa_class",
                    "text": "ASA physical status class",
                    "type": "select",
                    "required": True,
                    "options": [
                        {"value": 1, "label": "ASA I - normal healthy patient"},
                        {"value": 2, "label": "ASA II - mild systemic disease"},
                        {"value": 3, "label": "ASA III - severe systemic disease"},
                        {"value": 4, "label": "ASA IV - severe systemic disease that is a constant threat to life"},
                        {"value": 5, "label": "ASA V - moribund, not expected to survive without the operation"},
                        {"value": 6, "label": "ASA VI - declared brain-dead organ donor"},
                    ],
                },
                {
                    "id": "is_emergency",
                    "text": "Emergency operation",
                    "type": "boolean",
                    "score": 0,
                },
            ],
        }
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 1, "max": 2, "category": "asa_1", "label": "ASA I: healthy patient, mortality about 0.1%"},
            {"min": 2, "max": 3, "category": "asa_2", "label": "ASA II: mild systemic disease, mortality about 0.2%"},
            {"min": 3, "max": 4, "category": "asa_3", "label": "ASA III: severe systemic disease, mortality about 1.8%"},
            {"min": 4, "max": 5, "category": "asa_4", "label": "ASA IV: life-threatening systemic disease, mortality about 7.8%"},
            {"min": 5, "max": 6, "category": "asa_5", "label": "ASA V: moribund patient, mortality about 9.4%"},
            {"min": 6, "max": None, "category": "asa_6", "label": "ASA VI: brain-dead organ donor"},
        ]
    },
    # emergency operations carry the "E" suffix; ASA VI never does
    "modifiers": [
        {"question_id": "is_emergency", "category_suffix": "_e", "label_suffix": " (emergency operation)", "below": 6},
    ],
}

RCRI_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e02",
    "code": "RCRI",
    "name": "Revised Cardiac Risk Index (Lee)",
    "description": "Risk of major adverse cardiac events after non-cardiac surgery.",
    "category": "cardiology",
    "questions": [
        {
            "section": "risk_factors",
            "title": "Risk factors",
            "questions": [
                {"id": "high_risk_surgery", "text": "High-risk surgery (intraperitoneal, intrathoracic or suprainguinal vascular)", "type": "boolean", "score": 1},
                {"id": "ihd", "text": "History of ischaemic heart disease", "type": "boolean", "score": 1},
                {"id": "chf", "text": "History of congestive heart failure", "type": "boolean", "score": 1},
                {"id": "cvd", "text": "History of cerebrovascular disease", "type": "boolean", "score": 1},
                {"id": "insulin_dm", "text": "Diabetes treated with insulin", "type": "boolean", "score": 1},
                {"id": "ckd", "text": "Preoperative creatinine above 177 umol/L (2 mg/dL)", "type": "boolean", "score": 1},
            ],
        }
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 1, "category": "class_i", "label": "Class I: MACE risk 3.9%"},
            {"min": 1, "max": 2, "category": "class_ii", "label": "Class II: MACE risk 6.0%"},
            {"min": 2, "max": 3, "category": "class_iii", "label": "Class III: MACE risk 10.1%"},
            {"min": 3, "max": None, "category": "class_iv", "label": "Class IV: MACE risk 15% or higher"},
        ]
    },
}

GOLDMAN_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e03",
    "code": "GOLDMAN",
    "name": "Goldman Cardiac Risk Index",
    "description": "Original multifactorial index of cardiac risk in non-cardiac surgery.",
    "category": "cardiology",
    "questions": [
        {
            "section": "history",
            "title": "History and examination",
            "questions": [
                {"id": "s3_or_jvd", "text": "S3 gallop or jugular venous distension", "type": "boolean", "score": 11},
                {"id": "recent_mi", "text": "Myocardial infarction in the previous 6 months", "type": "boolean", "score": 10},
                {"id": "age_over_70", "text": "Age over 70 years", "type": "boolean", "score": 5},
                {"id": "aortic_stenosis", "text": "Important valvular aortic stenosis", "type": "boolean", "score": 3},
            ],
        },
        {
            "section": "ecg",
            "title": "ECG",
            "questions": [
                {"id": "non_sinus_rhythm", "text": "Rhythm other than sinus or premature atrial contractions", "type": "boolean", "score": 7},
                {"id": "pvcs", "text": "More than 5 premature ventricular contractions per minute", "type": "boolean", "score": 7},
            ],
        },
        {
            "section": "status",
            "title": "General status and operation",
            "questions": [
                {"id": "poor_general_status", "text": "Poor general medical status (blood gases, electrolytes, renal or hepatic abnormality, bedridden)", "type": "boolean", "score": 3},
                {"id": "major_surgery", "text": "Intraperitoneal, intrathoracic or aortic operation", "type": "boolean", "score": 3},
                {"id": "emergency", "text": "Emergency operation", "type": "boolean", "score": 4},
            ],
        },
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 6, "category": "class_i", "label": "Class I: minimal risk (0-5 points)"},
            {"min": 6, "max": 13, "category": "class_ii", "label": "Class II: low risk (6-12 points)"},
            {"min": 13, "max": 26, "category": "class_iii", "label": "Class III: moderate risk (13-25 points)"},
            {"min": 26, "max": None, "category": "class_iv", "label": "Class IV: high risk (26 points or more)"},
        ]
    },
}

CAPRINI_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e04",
    "code": "CAPRINI",
    "name": "Caprini VTE Risk Score",
    "description": "Venous thromboembolism risk in surgical patients.",
    "category": "surgery",
    "questions": [
        {
            "section": "age",
            "title": "Age",
            "questions": [
                {
                    "id": "age_group",
                    "text": "Age group",
                    "type": "select",
                    "options": [
                        {"value": "40_or_less", "label": "40 years or younger", "score": 0},
                        {"value": "41_60", "label": "41-60 years", "score": 1},
                        {"value": "61_74", "label": "61-74 years", "score": 2},
                        {"value": "75_plus", "label": "75 years or older", "score": 3},
                    ],
                },
            ],
        },
        {
            "section": "one_point",
            "title": "1 point each",
            "questions": [
                {"id": "minor_surgery", "text": "Minor surgery planned", "type": "boolean", "score": 1},
                {"id": "bmi_over_25", "text": "BMI above 25 kg/m2", "type": "boolean", "score": 1},
                {"id": "swollen_legs", "text": "Swollen legs", "type": "boolean", "score": 1},
                {"id": "varicose_veins", "text": "Varicose veins", "type": "boolean", "score": 1},
                {"id": "sepsis", "text": "Sepsis within the last month", "type": "boolean", "score": 1},
                {"id": "lung_disease", "text": "Serious lung disease including pneumonia within the last month", "type": "boolean", "score": 1},
                {"id": "acute_mi", "text": "Acute myocardial infarction", "type": "boolean", "score": 1},
                {"id": "chf", "text": "Congestive heart failure within the last month", "type": "boolean", "score": 1},
                {"id": "ibd", "text": "History of inflammatory bowel disease", "type": "boolean", "score": 1},
                {"id": "bed_rest", "text": "Medical patient currently at bed rest", "type": "boolean", "score": 1},
            ],
        },
        {
            "section": "two_points",
            "title": "2 points each",
            "questions": [
                {"id": "arthroscopic_surgery", "text": "Arthroscopic surgery", "type": "boolean", "score": 2},
                {"id": "major_open_surgery", "text": "Major open surgery over 45 minutes", "type": "boolean", "score": 2},
                {"id": "laparoscopic_surgery", "text": "Laparoscopic surgery over 45 minutes", "type": "boolean", "score": 2},
                {"id": "malignancy", "text": "Malignancy, present or previous", "type": "boolean", "score": 2},
                {"id": "confined_to_bed", "text": "Confined to bed for more than 72 hours", "type": "boolean", "score": 2},
                {"id": "immobilizing_cast", "text": "Immobilizing plaster cast", "type": "boolean", "score": 2},
                {"id": "central_venous_access", "text": "Central venous access", "type": "boolean", "score": 2},
            ],
        },
        {
            "section": "three_points",
            "title": "3 points each",
            "questions": [
                {"id": "history_vte", "text": "History of venous thromboembolism", "type": "boolean", "score": 3},
                {"id": "family_history_vte", "text": "Family history of venous thromboembolism", "type": "boolean", "score": 3},
                {"id": "factor_v_leiden", "text": "Factor V Leiden", "type": "boolean", "score": 3},
                {"id": "prothrombin_mutation", "text": "Prothrombin 20210A mutation", "type": "boolean", "score": 3},
                {"id": "lupus_anticoagulant", "text": "Lupus anticoagulant", "type": "boolean", "score": 3},
                {"id": "anticardiolipin", "text": "Anticardiolipin antibodies", "type": "boolean", "score": 3},
                {"id": "homocysteine", "text": "Elevated serum homocysteine", "type": "boolean", "score": 3},
                {"id": "hit", "text": "Heparin-induced thrombocytopenia", "type": "boolean", "score": 3},
            ],
        },
        {
            "section": "five_points",
            "title": "5 points each",
            "questions": [
                {"id": "stroke", "text": "Stroke within the last month", "type": "boolean", "score": 5},
                {"id": "elective_arthroplasty", "text": "Elective major lower extremity arthroplasty", "type": "boolean", "score": 5},
                {"id": "hip_pelvis_leg_fracture", "text": "Hip, pelvis or leg fracture", "type": "boolean", "score": 5},
                {"id": "spinal_cord_injury", "text": "Acute spinal cord injury within the last month", "type": "boolean", "score": 5},
            ],
        },
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 1, "category": "very_low", "label": "Very low VTE risk (0 points)"},
            {"min": 1, "max": 3, "category": "low", "label": "Low VTE risk (1-2 points)"},
            {"min": 3, "max": 5, "category": "moderate", "label": "Moderate VTE risk (3-4 points)"},
            {"min": 5, "max": None, "category": "high", "label": "High VTE risk (5 points or more)"},
        ]
    },
}

_BASDAI_ITEMS = [
    ("q1", "How would you describe the overall level of fatigue/tiredness you have experienced?", 0.2),
    ("q2", "How would you describe the overall level of neck, back or hip pain you have had?", 0.2),
    ("q3", "How would you describe the overall level of pain/swelling in joints other than neck, back or hips?", 0.2),
    ("q4", "How would you describe the overall level of discomfort from areas tender to touch or pressure?", 0.2),
    ("q5", "How would you describe the overall level of morning stiffness from the time you wake up?", 0.1),
    ("q6", "How long does your morning stiffness last from the time you wake up? (0 = none, 10 = 2 hours or more)", 0.1),
]

BASDAI_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e05",
    "code": "BASDAI",
    "name": "Bath Ankylosing Spondylitis Disease Activity Index",
    "description": "Self-reported disease activity over the last week.",
    "category": "rheumatology",
    "questions": [
        {
            "section": "last_week",
            "title": "During the last week",
            "questions": [
                {
                    "id": item_id,
                    "text": text,
                    "type": "vas",
                    "min": 0,
                    "max": 10,
                    "score": weight,
                    "labels": {"0": "None", "10": "Very severe"},
                    "extra": {"step": 0.5},
                }
                for item_id, text, weight in _BASDAI_ITEMS
            ],
        }
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 4, "category": "low_activity", "label": "Low disease activity"},
            {"min": 4, "max": None, "category": "high_activity", "label": "High disease activity"},
        ]
    },
}

DAS28_CRP_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e06",
    "code": "DAS28_CRP",
    "name": "Disease Activity Score 28 (CRP)",
    "description": "Rheumatoid arthritis activity from joint counts, CRP and global health.",
    "category": "rheumatology",
    "questions": [
        {
            "section": "examination",
            "title": "Joint examination",
            "questions": [
                {"id": "tjc28", "text": "Tender joint count (28 joints)", "type": "number", "min": 0, "max": 28, "score": 0.56, "extra": {"transform": "sqrt", "step": 1}},
                {"id": "sjc28", "text": "Swollen joint count (28 joints)", "type": "number", "min": 0, "max": 28, "score": 0.28, "extra": {"transform": "sqrt", "step": 1}},
            ],
        },
        {
            "section": "laboratory",
            "title": "Laboratory",
            "questions": [
                {"id": "crp", "text": "C-reactive protein, mg/L", "type": "number", "min": 0, "max": 300, "score": 0.36, "extra": {"transform": "log1p"}},
            ],
        },
        {
            "section": "patient",
            "title": "Patient assessment",
            "questions": [
                {"id": "gh", "text": "Patient global assessment of health", "type": "vas100", "min": 0, "max": 100, "score": 0.014, "labels": {"0": "Very good", "100": "Very bad"}},
            ],
        },
    ],
    "scoring_logic": {"type": "sum", "offset": 0.96},
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 2.6, "category": "remission", "label": "Remission"},
            {"min": 2.6, "max": 3.2, "category": "low_activity", "label": "Low disease activity"},
            {"min": 3.2, "max": 5.1, "category": "moderate_activity", "label": "Moderate disease activity"},
            {"min": 5.1, "max": None, "category": "high_activity", "label": "High disease activity"},
        ]
    },
}

_BVAS_SECTIONS = [
    ("general", "General", [
        ("myalgia", "Myalgia", 1),
        ("arthralgia", "Arthralgia or arthritis", 1),
        ("fever", "Fever of 38 C or above", 2),
        ("weight_loss", "Weight loss of 2 kg or more", 2),
    ]),
    ("cutaneous", "Cutaneous", [
        ("skin_infarct", "Infarct", 2),
        ("purpura", "Purpura", 2),
        ("skin_ulcer", "Ulcer", 4),
        ("gangrene", "Gangrene", 6),
        ("other_skin_vasculitis", "Other skin vasculitis", 2),
    ]),
    ("mucous_eyes", "Mucous membranes and eyes", [
        ("mouth_ulcers", "Mouth ulcers", 2),
        ("genital_ulcers", "Genital ulcers", 1),
        ("adnexal_inflammation", "Adnexal inflammation", 4),
        ("proptosis", "Significant proptosis", 4),
        ("scleritis", "Scleritis or episcleritis", 2),
        ("conjunctivitis", "Conjunctivitis, blepharitis or keratitis", 1),
        ("blurred_vision", "Blurred vision", 3),
        ("sudden_visual_loss", "Sudden visual loss", 6),
        ("uveitis", "Uveitis", 6),
        ("retinal_changes", "Retinal changes", 6),
    ]),
    ("ent", "Ear, nose and throat", [
        ("bloody_nasal_discharge", "Bloody nasal discharge, crusts, ulcers or granulomata", 4),
        ("sinus_involvement", "Paranasal sinus involvement", 2),
        ("subglottic_stenosis", "Subglottic stenosis", 6),
        ("conductive_hearing_loss", "Conductive hearing loss", 3),
        ("sensorineural_hearing_loss", "Sensorineural hearing loss", 6),
    ]),
    ("chest", "Chest", [
        ("wheeze", "Wheeze", 2),
        ("nodules_cavities", "Nodules or cavities", 3),
        ("pleural_effusion", "Pleural effusion or pleurisy", 4),
        ("infiltrate", "Infiltrate", 4),
        ("endobronchial", "Endobronchial involvement", 4),
        ("alveolar_haemorrhage", "Massive haemoptysis or alveolar haemorrhage", 6),
        ("respiratory_failure", "Respiratory failure", 6),
    ]),
    ("cardiovascular", "Cardiovascular", [
        ("loss_of_pulses", "Loss of pulses", 4),
        ("valvular_disease", "Valvular heart disease", 4),
        ("pericarditis", "Pericarditis", 3),
        ("ischaemic_cardiac_pain", "Ischaemic cardiac pain", 4),
        ("cardiomyopathy", "Cardiomyopathy", 6),
        ("heart_failure", "Congestive cardiac failure", 6),
    ]),
    ("abdominal", "Abdominal", [
        ("peritonitis", "Peritonitis", 9),
        ("bloody_diarrhoea", "Bloody diarrhoea", 6),
        ("ischaemic_abdominal_pain", "Ischaemic abdominal pain", 6),
    ]),
    ("renal", "Renal", [
        ("hypertension", "Hypertension", 4),
        ("proteinuria", "Proteinuria above 1+", 4),
        ("haematuria", "Haematuria of 10 RBCs/hpf or more", 6),
        ("creatinine_125", "Serum creatinine 125-249 umol/L", 4),
        ("creatinine_250", "Serum creatinine 250-499 umol/L", 6),
        ("creatinine_500", "Serum creatinine 500 umol/L or above", 8),
        ("creatinine_rise", "Rise in serum creatinine above 30% or fall in creatinine clearance above 25%", 6),
    ]),
    ("nervous", "Nervous system", [
        ("headache", "Headache", 1),
        ("meningitis", "Meningitis", 3),
        ("organic_confusion", "Organic confusion", 3),
        ("seizures", "Seizures (not hypertensive)", 9),
        ("stroke", "Cerebrovascular accident", 9),
        ("spinal_cord_lesion", "Spinal cord lesion", 9),
        ("cranial_nerve_palsy", "Cranial nerve palsy", 6),
        ("sensory_neuropathy", "Sensory peripheral neuropathy", 6),
        ("mononeuritis_multiplex", "Mononeuritis multiplex", 9),
    ]),
]

BVAS_V3_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e08",
    "code": "BVAS_V3",
    "name": "Birmingham Vasculitis Activity Score v3",
    "description": "Systemic vasculitis activity from new or worsening features in the last 4 weeks.",
    "category": "rheumatology",
    "questions": [
        {
            "section": section,
            "title": title,
            "questions": [
                {"id": item_id, "text": text, "type": "boolean", "score": points}
                for item_id, text, points in items
            ],
        }
        for section, title, items in _BVAS_SECTIONS
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 1, "category": "remission", "label": "Remission: no active vasculitis"},
            {"min": 1, "max": 16, "category": "active", "label": "Active vasculitis"},
            {"min": 16, "max": None, "category": "severe", "label": "Severe active vasculitis"},
        ]
    },
}

PAIN_DIARY_TEMPLATE = {
    "id": "7d0f7c1e-8a55-4a3e-9a3f-0a1b2c3d4e07",
    "code": "PAIN_DIARY",
    "name": "Pain and wellbeing diary",
    "description": "Patient diary: pain intensity plus free-text notes for the care team.",
    "category": "patient_reported",
    "questions": [
        {
            "section": "pain",
            "title": "Pain",
            "questions": [
                {"id": "pain_now", "text": "Pain right now", "type": "vas", "min": 0, "max": 10, "score": 0.5},
                {"id": "pain_week", "text": "Average pain over the last week", "type": "vas", "min": 0, "max": 10, "score": 0.5},
            ],
        },
        {
            "section": "notes",
            "title": "Notes",
            "questions": [
                {"id": "symptoms", "text": "Symptoms you noticed", "type": "text"},
                {"id": "concerns", "text": "What worries you most", "type": "text"},
            ],
        },
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 4, "category": "mild", "label": "Mild pain"},
            {"min": 4, "max": 7, "category": "moderate", "label": "Moderate pain"},
            {"min": 7, "max": None, "category": "severe", "label": "Severe pain"},
        ]
    },
}

BUILTIN_TEMPLATES = [
    ASA_TEMPLATE,
    RCRI_TEMPLATE,
    GOLDMAN_TEMPLATE,
    CAPRINI_TEMPLATE,
    BASDAI_TEMPLATE,
    DAS28_CRP_TEMPLATE,
    BVAS_V3_TEMPLATE,
    PAIN_DIARY_TEMPLATE,
]
