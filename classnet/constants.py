# NOTE: MODIFY TS ONLY WHEN U WANNA CHANGE THE OVERALL PARAMETERS OF THE ANALYSIS.

DEFAULT_RELATION_TYPE = 'general'
DEFAULT_WEIGHT = 1.0
DEFAULT_GROUP = 1
DEFAULT_COMMUNITY = 1

# question keyword -> relation type, first hit wins so keep korean first
QUESTION_TYPE_KEYWORDS = [
    ('친구', 'friendship'),
    ('좋아', 'preference'),
    ('협업', 'collaboration'),
    ('도움', 'help'),
    ('공부', 'study'),
    ('선택', 'selection'),
    ('함께', 'together'),
    ('소통', 'communication'),
    ('신뢰', 'trust'),
    ('friend', 'friendship'),
    ('prefer', 'preference'),
    ('collaborat', 'collaboration'),
    ('help', 'help'),
    ('study', 'study'),
    ('select', 'selection'),
    ('together', 'together'),
    ('communicat', 'communication'),
    ('trust', 'trust'),
]

# csv header heuristics
RESPONDENT_KEYWORDS = ['이름', '학생', '응답자', '본인', 'name', 'student', 'respondent']
EXCLUDE_KEYWORDS = ['timestamp', '타임스탬프', '제출', '시간', 'time']
METADATA_KEYWORDS = ['학년', '반', '성별', 'gender', 'grade', 'class']

# one cell can hold several names
MULTI_VALUE_SPLIT = r'[,;\n]+'

# survey files: google forms exports utf-8 (maybe with a BOM), korean excel saves cp949
CSV_ENCODINGS = ['utf-8-sig', 'cp949']

# ids
STUDENT_ID_PREFIX = 'STU_'
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

# eigenvector power iteration
EIGENVECTOR_MAX_ITER = 1000
EIGENVECTOR_TOL = 1e-6

# louvain
LOUVAIN_RESOLUTION = 1.0

CENTRALITY_METRICS = ['inDegree', 'outDegree', 'betweenness', 'closeness', 'eigenvector']

# oracle quality gate: when the fast model's output looks off we re-run on the bigger one
UNKNOWN_STUDENT_RATIO = 0.05
MIN_STUDENT_COUNT_RATIO = 0.75
MAX_STUDENT_COUNT_RATIO = 1.25

DEFAULT_MODEL = 'gemini-3-flash-preview'
FALLBACK_MODEL = 'gemini-2.5-pro'

MODEL_ALIASES = {
    'pro': 'gemini-2.5-pro',
    '2.5-pro': 'gemini-2.5-pro',
    'gemini-2.5-pro': 'gemini-2.5-pro',
    '3.1-pro': 'gemini-3.1-pro-preview',
    '3.1-pro-preview': 'gemini-3.1-pro-preview',
    'gemini-3.1-pro-preview': 'gemini-3.1-pro-preview',
    'pro-preview': 'gemini-3.1-pro-preview',
    '3.0-flash': 'gemini-3-flash-preview',
    '3-flash': 'gemini-3-flash-preview',
    'flash': 'gemini-3-flash-preview',
    'gemini-3-flash-preview': 'gemini-3-flash-preview',
}
