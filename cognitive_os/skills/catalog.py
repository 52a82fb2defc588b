"""
Default Skill Catalog

The cognitive skills tracked by the training suite and the games that
train them. Loaded through SkillRegistry.default(); deployments can
supply their own catalog with the same shape.
"""

DEFAULT_CATALOG = {
    "skills": [
        # Working memory
        {"id": "wm.visual", "name": "Visual Working Memory", "domain": "memory",
         "description": "Hold visual patterns in mind"},
        {"id": "wm.spatial", "name": "Spatial Working Memory", "domain": "memory",
         "description": "Remember locations and spatial relationships"},
        {"id": "wm.sequence", "name": "Sequence Working Memory", "domain": "memory",
         "description": "Remember ordered sequences"},
        {"id": "wm.binding", "name": "Feature Binding", "domain": "memory",
         "description": "Link features (color, shape, position)"},

        # Attention
        {"id": "attn.selective", "name": "Selective Attention", "domain": "attention",
         "description": "Focus on relevant stimuli"},
        {"id": "attn.divided", "name": "Divided Attention", "domain": "attention",
         "description": "Monitor multiple streams simultaneously"},
        {"id": "attn.sustained", "name": "Sustained Attention", "domain": "attention",
         "description": "Maintain focus over time"},
        {"id": "attn.breadth", "name": "Attentional Breadth", "domain": "attention",
         "description": "Expand peripheral awareness"},

        # Cognitive control
        {"id": "control.inhibition", "name": "Inhibitory Control", "domain": "control",
         "description": "Suppress automatic responses"},
        {"id": "control.switching", "name": "Task Switching", "domain": "control",
         "description": "Switch between task rules"},
        {"id": "control.conflict", "name": "Conflict Monitoring", "domain": "control",
         "description": "Detect and resolve conflicts"},

        # Perception
        {"id": "percept.discrimination", "name": "Fine Discrimination", "domain": "perception",
         "description": "Distinguish similar stimuli"},
        {"id": "percept.noise_robust", "name": "Noise Robustness", "domain": "perception",
         "description": "Perceive under interference"},
        {"id": "percept.temporal", "name": "Temporal Resolution", "domain": "perception",
         "description": "Detect rapid changes"},

        # Cross-modal integration
        {"id": "xmodal.audiovisual", "name": "Audiovisual Binding", "domain": "integration",
         "description": "Integrate sight and sound"},
        {"id": "xmodal.sequence", "name": "Multimodal Sequences", "domain": "integration",
         "description": "Track cross-modal patterns"},

        # Auditory cognition
        {"id": "audio.pitch", "name": "Pitch Discrimination", "domain": "auditory",
         "description": "Distinguish pitch differences"},
        {"id": "audio.rhythm", "name": "Rhythm Timing", "domain": "auditory",
         "description": "Perceive temporal patterns"},
        {"id": "audio.parsing", "name": "Auditory Scene Parsing", "domain": "auditory",
         "description": "Separate sound sources"},
    ],
    "games": {
        "symbol_memory": {
            "name": "Symbol Memory",
            "skills": ["wm.visual", "wm.binding", "attn.selective"],
            "intensity": "low",
            "minutes": 5,
        },
        "morph_matrix": {
            "name": "Morph Matrix",
            "skills": ["wm.spatial", "percept.discrimination", "control.conflict"],
            "intensity": "medium",
            "minutes": 6,
        },
        "expand_vision": {
            "name": "Expand Vision",
            "skills": ["attn.breadth", "attn.divided", "percept.temporal"],
            "intensity": "high",
            "minutes": 4,
        },
        "neural_flow": {
            "name": "Neural Flow",
            "skills": ["control.switching", "control.conflict", "percept.temporal"],
            "intensity": "high",
            "minutes": 5,
        },
        "neural_synthesis": {
            "name": "Neural Synthesis",
            "skills": ["xmodal.audiovisual", "xmodal.sequence", "wm.sequence"],
            "intensity": "medium",
            "minutes": 7,
        },
        "music_theory": {
            "name": "Music Theory",
            "skills": ["audio.pitch", "audio.parsing", "percept.discrimination"],
            "intensity": "low",
            "minutes": 8,
        },
        "psychoacoustic_wizard": {
            "name": "Psychoacoustic Wizard",
            "skills": ["audio.rhythm", "percept.temporal", "control.conflict"],
            "intensity": "medium",
            "minutes": 6,
        },
    },
}
