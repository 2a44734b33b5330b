"""Fixed sentiment lexicon for evaluation feedback.

Weights are tuned for feedback on extracted paper analyses: domain terms
like "matched" or "misidentified" carry as much signal as general praise
or criticism. All tables are read-only.
"""

from types import MappingProxyType

POSITIVE_WORDS = MappingProxyType({
    # Strong
    "excellent": 1.0,
    "outstanding": 1.0,
    "perfect": 1.0,
    "amazing": 0.95,
    "exceptional": 0.95,
    "fantastic": 0.9,
    "superb": 0.9,
    "impressive": 0.85,
    "brilliant": 0.85,
    # Medium
    "great": 0.8,
    "good": 0.7,
    "accurate": 0.75,
    "correct": 0.75,
    "helpful": 0.7,
    "useful": 0.7,
    "effective": 0.7,
    "appropriate": 0.65,
    "suitable": 0.65,
    "relevant": 0.65,
    "clear": 0.6,
    "nice": 0.6,
    "well": 0.6,
    "complete": 0.7,
    "comprehensive": 0.75,
    "thorough": 0.7,
    "detailed": 0.65,
    # Light
    "fine": 0.5,
    "okay": 0.4,
    "ok": 0.4,
    "adequate": 0.45,
    "reasonable": 0.5,
    "acceptable": 0.45,
    "satisfactory": 0.5,
    "decent": 0.5,
    # Domain
    "matched": 0.7,
    "extracted": 0.6,
    "identified": 0.65,
    "recognized": 0.65,
    "aligned": 0.7,
    "consistent": 0.65,
    "reliable": 0.7,
    "precise": 0.75,
    "valid": 0.65,
    "properly": 0.6,
    "successfully": 0.7,
    "correctly": 0.7,
    "improved": 0.65,
    "innovative": 0.75,
    "intuitive": 0.7,
})

NEGATIVE_WORDS = MappingProxyType({
    # Strong
    "terrible": -1.0,
    "awful": -1.0,
    "horrible": -1.0,
    "worst": -0.95,
    "useless": -0.9,
    "completely wrong": -0.95,
    "totally incorrect": -0.95,
    # Medium
    "wrong": -0.75,
    "incorrect": -0.75,
    "bad": -0.7,
    "poor": -0.7,
    "inaccurate": -0.75,
    "missing": -0.65,
    "error": -0.7,
    "errors": -0.7,
    "failed": -0.75,
    "failure": -0.75,
    "problematic": -0.65,
    "issue": -0.5,
    "issues": -0.55,
    "problem": -0.55,
    "problems": -0.6,
    "confusing": -0.6,
    "confused": -0.55,
    "unclear": -0.55,
    "difficult": -0.5,
    "frustrating": -0.7,
    "disappointing": -0.65,
    "incomplete": -0.6,
    # Light
    "minor": -0.3,
    "slight": -0.25,
    "somewhat": -0.2,
    "could be better": -0.4,
    "needs improvement": -0.45,
    "not ideal": -0.4,
    "limited": -0.4,
    # Domain
    "irrelevant": -0.7,
    "unrelated": -0.65,
    "mismatch": -0.6,
    "mismatched": -0.6,
    "misidentified": -0.7,
    "misextracted": -0.7,
    "inconsistent": -0.6,
    "unreliable": -0.7,
    "invalid": -0.65,
    "buggy": -0.7,
    "slow": -0.5,
    "crashed": -0.8,
    "unresponsive": -0.7,
})

# Keyed on the single token right before a lexical hit
INTENSIFIERS = MappingProxyType({
    "very": 1.5,
    "really": 1.4,
    "extremely": 1.7,
    "highly": 1.5,
    "incredibly": 1.6,
    "absolutely": 1.6,
    "completely": 1.5,
    "totally": 1.5,
    "quite": 1.2,
    "fairly": 1.1,
    "rather": 1.1,
    "somewhat": 0.7,
    "slightly": 0.6,
    "mostly": 1.1,
})

NEGATIONS = frozenset({
    "not", "no", "never", "neither", "n't", "none", "nothing", "nowhere",
    "hardly", "barely", "scarcely", "doesn't", "don't", "didn't", "won't",
    "wouldn't", "couldn't", "shouldn't",
})

NEGATION_WINDOW = 3  # tokens looked back for a negation
NEGATION_FACTOR = -0.8  # flip and damp

POSITIVE_PHRASES = tuple(p for p in POSITIVE_WORDS if " " in p)
NEGATIVE_PHRASES = tuple(p for p in NEGATIVE_WORDS if " " in p)

THEME_KEYWORDS = MappingProxyType({
    "Accuracy": ("accurate", "correct", "wrong", "incorrect", "match", "mismatch", "precise", "error"),
    "Completeness": ("complete", "incomplete", "missing", "partial", "full", "comprehensive", "thorough"),
    "Relevance": ("relevant", "irrelevant", "related", "unrelated", "appropriate", "suitable"),
    "Clarity": ("clear", "unclear", "confusing", "understandable", "readable", "well-written"),
    "Performance": ("fast", "slow", "responsive", "lag", "speed", "quick", "performance"),
    "Usability": ("easy", "difficult", "intuitive", "user-friendly", "confusing", "usable"),
    "Quality": ("good", "bad", "excellent", "poor", "quality", "well", "great"),
    "Suggestions": ("should", "could", "would", "suggest", "recommend", "improve", "better", "need"),
})
