"""Root conftest.py for test configuration and shared Rust sources.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))


FULL_PROGRAM_SOURCE = """\
// Sample crate exercising both harness dialects.
use std::collections::HashMap;

#[kani::proof]
fn insert_test() {
    let mut map: HashMap<u32, u32> = HashMap::new();
    let key: u32 = kani::any();
    map.insert(key, 1);
    assert!(map.contains_key(&key));
}

#[kani::proof]
#[kani::unwind(0)]
fn insert_test_2() {
    let x: u8 = kani::any();
    assert!(x as u16 <= 255);
}

/// Checks that addition is commutative.
/// Uses the kissat backend.
#[kani::proof]
#[kani::solver(kissat)]
#[kani::stub(rand::random, mock_random)]
#[kani::recursion]
fn random_name() {
    let a: u8 = kani::any();
    let b: u8 = kani::any();
    assert_eq!(a.wrapping_add(b), b.wrapping_add(a));
}

fn function_abc() {
    bolero::check!().with_type::<u8>().cloned().for_each(|a| {
        assert!(a == a);
    });
}

#[test]
fn function_xyz() {
    bolero::check!().with_type::<u32>().for_each(|b| assert!(*b == *b));
}

fn helper() -> u32 {
    3
}
"""

KANI_PROOFS_SOURCE = """\
#[kani::proof]
fn first_proof() {
    assert!(true);
}

fn not_a_proof() {
    let _ = helper();
}

#[kani::proof]
#[kani::should_panic]
fn panicking_proof() {
    panic!("expected");
}
"""

BOLERO_PROOFS_SOURCE = """\
use bolero::check;

#[test]
#[cfg_attr(kani, kani::proof)]
#[cfg_attr(kani, kani::unwind(10))]
fn bolero_under_kani() {
    check!().with_type::<u8>().for_each(|x| assert!(*x <= 255));
}

#[test]
fn bolero_plain_test() {
    bolero::check!().with_type::<u16>().for_each(|x| assert!(*x <= 65535));
}

#[test]
fn ordinary_test() {
    assert_eq!(2 + 2, 4);
}
"""

NESTED_MODULES_SOURCE = """\
pub fn div(a: u32, b: u32) -> u32 {
    a / b
}

#[cfg(kani)]
mod verification {
    use super::*;

    #[kani::proof]
    fn check_nested() {
        assert!(div(4, 2) == 2);
    }

    mod inner {
        #[kani::proof_for_contract(crate::div)]
        fn check_div_contract() {
            let _ = crate::div(kani::any(), 1);
        }
    }
}
"""

PLAYBACK_SOURCE = """\
#[kani::proof]
fn insert_test() {
    let x: u32 = kani::any();
    assert!(x != 7);
}

#[test]
fn kani_concrete_playback_insert_test_15619039213425592125() {
    let concrete_vals: Vec<Vec<u8>> = vec![
        // 7
        vec![7, 0, 0, 0],
    ];
    kani::concrete_playback_run(concrete_vals, insert_test);
}

#[test]
fn kani_concrete_playback_insert_test_9928306412163296282() {
    let concrete_vals: Vec<Vec<u8>> = vec![vec![7, 0, 0, 0]];
    kani::concrete_playback_run(concrete_vals, insert_test);
}

#[kani::proof]
fn other_harness() {
    assert!(kani::any::<bool>() || true);
}

#[test]
fn kani_concrete_playback_other_harness_42() {
    let concrete_vals: Vec<Vec<u8>> = vec![vec![0]];
    kani::concrete_playback_run(concrete_vals, other_harness);
}

fn kani_concrete_playback_not_a_wrapper_1() {
    println!("no runner call here");
}
"""

RUST_FILE_WITHOUT_PROOF = """\
pub struct Counter {
    value: u64,
}

impl Counter {
    pub fn bump(&mut self) {
        self.value += 1;
    }
}

#[test]
fn counter_starts_at_zero() {
    let c = Counter { value: 0 };
    assert_eq!(c.value, 0);
}
"""


def _line_of(source: str, needle: str) -> int:
    """1-based line of the first line containing ``needle``."""
    for number, line in enumerate(source.splitlines(), start=1):
        if needle in line:
            return number
    raise AssertionError(f"{needle!r} not in source")


@pytest.fixture
def line_of() -> Callable[[str, str], int]:
    """Lookup helper: 1-based line of the first line containing a needle."""
    return _line_of


@pytest.fixture
def full_program_source() -> str:
    return FULL_PROGRAM_SOURCE


@pytest.fixture
def kani_proofs_source() -> str:
    return KANI_PROOFS_SOURCE


@pytest.fixture
def bolero_proofs_source() -> str:
    return BOLERO_PROOFS_SOURCE


@pytest.fixture
def nested_modules_source() -> str:
    return NESTED_MODULES_SOURCE


@pytest.fixture
def playback_source() -> str:
    return PLAYBACK_SOURCE


@pytest.fixture
def rust_file_without_proof() -> str:
    return RUST_FILE_WITHOUT_PROOF
