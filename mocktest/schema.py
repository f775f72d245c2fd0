"""SQL schema for the Supabase store. Run in the Supabase SQL Editor (see init_db.py)."""

# Core tables: registrations, subjects, questions, test_results
SCHEMA_SQL = """
-- Registration data, one row per user email
CREATE TABLE IF NOT EXISTS registrations (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    email text UNIQUE NOT NULL,
    first_name text NOT NULL,
    last_name text NOT NULL,
    phone text NOT NULL,
    date_of_birth date NOT NULL,
    gender text NOT NULL CHECK (gender IN ('male', 'female', 'other', 'prefer-not-to-say')),
    address text NOT NULL,
    city text NOT NULL,
    state text NOT NULL,
    zip_code text NOT NULL,
    country text NOT NULL,
    education text NOT NULL,
    institution text,
    field_of_study text,
    experience text,
    hear_about_us text,
    created_at timestamptz DEFAULT now()
);

-- Test subjects
CREATE TABLE IF NOT EXISTS subjects (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    name text UNIQUE NOT NULL,
    description text,
    is_active boolean DEFAULT true,
    questions_per_test integer DEFAULT 20,
    time_limit_minutes integer DEFAULT 40,
    created_at timestamptz DEFAULT now()
);

-- Question bank (correct_answer is 1-based: 1 = option_a)
CREATE TABLE IF NOT EXISTS questions (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    subject text NOT NULL,
    question text NOT NULL,
    option_a text NOT NULL,
    option_b text NOT NULL,
    option_c text NOT NULL,
    option_d text NOT NULL,
    correct_answer integer NOT NULL CHECK (correct_answer BETWEEN 1 AND 4),
    difficulty text NOT NULL CHECK (difficulty IN ('easy', 'medium', 'hard')),
    explanation text,
    created_at timestamptz DEFAULT now()
);

-- One row per (submission, subject)
CREATE TABLE IF NOT EXISTS test_results (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    email text NOT NULL,
    test_time timestamptz NOT NULL,
    subject text NOT NULL,
    questions jsonb NOT NULL,
    answers jsonb NOT NULL,
    score integer NOT NULL CHECK (score BETWEEN 0 AND 100),
    duration_seconds integer NOT NULL,
    created_at timestamptz DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_questions_subject ON questions(subject);
CREATE INDEX IF NOT EXISTS idx_test_results_email ON test_results(email);
CREATE INDEX IF NOT EXISTS idx_test_results_subject ON test_results(subject);

ALTER TABLE registrations ENABLE ROW LEVEL SECURITY;
ALTER TABLE subjects ENABLE ROW LEVEL SECURITY;
ALTER TABLE questions ENABLE ROW LEVEL SECURITY;
ALTER TABLE test_results ENABLE ROW LEVEL SECURITY;

CREATE POLICY "Users can read own registration" ON registrations
    FOR SELECT TO authenticated USING (auth.jwt() ->> 'email' = email);
CREATE POLICY "Users can insert own registration" ON registrations
    FOR INSERT TO authenticated WITH CHECK (auth.jwt() ->> 'email' = email);
CREATE POLICY "Anyone can read subjects" ON subjects
    FOR SELECT TO authenticated USING (is_active = true);
CREATE POLICY "Authenticated users can read questions" ON questions
    FOR SELECT TO authenticated USING (true);
-- Insert only: students never read results back
CREATE POLICY "Users can insert test results" ON test_results
    FOR INSERT TO authenticated WITH CHECK (auth.jwt() ->> 'email' = email);

INSERT INTO subjects (name, description) VALUES
    ('Math', 'Mathematics including Algebra, Geometry, and Calculus'),
    ('Science', 'Physics, Chemistry, Biology, and Earth Science'),
    ('Reasoning', 'Logical Reasoning and Analytical Thinking')
ON CONFLICT (name) DO NOTHING;
"""

# Extended deployments: session tracking, admins, platform settings
EXTENDED_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS test_sessions (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    email text NOT NULL,
    session_token text UNIQUE NOT NULL,
    start_time timestamptz NOT NULL,
    end_time timestamptz,
    status text DEFAULT 'active' CHECK (status IN ('active', 'completed', 'abandoned', 'expired')),
    questions_data jsonb,
    current_question integer DEFAULT 0,
    created_at timestamptz DEFAULT now()
);

CREATE TABLE IF NOT EXISTS admin_users (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    email text UNIQUE NOT NULL,
    password_hash text NOT NULL,
    name text NOT NULL,
    role text DEFAULT 'admin' CHECK (role IN ('admin', 'super_admin')),
    is_active boolean DEFAULT true,
    last_login timestamptz,
    created_at timestamptz DEFAULT now()
);

CREATE TABLE IF NOT EXISTS system_config (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    config_key text UNIQUE NOT NULL,
    config_value jsonb NOT NULL,
    description text,
    is_active boolean DEFAULT true,
    created_at timestamptz DEFAULT now()
);

ALTER TABLE test_sessions ENABLE ROW LEVEL SECURITY;
ALTER TABLE admin_users ENABLE ROW LEVEL SECURITY;
ALTER TABLE system_config ENABLE ROW LEVEL SECURITY;

CREATE POLICY "Users can manage their own test sessions" ON test_sessions
    FOR ALL USING (auth.jwt() ->> 'email' = email);
CREATE POLICY "Authenticated users can view system config" ON system_config
    FOR SELECT USING (auth.role() = 'authenticated' AND is_active = true);
CREATE POLICY "Service role can manage admin users" ON admin_users
    FOR ALL USING (auth.role() = 'service_role');

INSERT INTO system_config (config_key, config_value, description) VALUES
    ('test_duration_minutes', '120', 'Total test duration in minutes'),
    ('questions_per_subject', '20', 'Number of questions per subject'),
    ('randomize_questions', 'true', 'Whether to randomize question order'),
    ('allow_review', 'true', 'Whether students can mark questions for review')
ON CONFLICT (config_key) DO NOTHING;
"""

TABLES = ("registrations", "subjects", "questions", "test_results")
EXTENDED_TABLES = ("test_sessions", "admin_users", "system_config")


def statements(sql: str) -> list[str]:
    """Split a schema script into individual statements."""
    return [s.strip() for s in sql.split(";") if s.strip()]
